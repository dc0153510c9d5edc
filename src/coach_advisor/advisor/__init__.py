from .service import AIAdvisor

__all__ = ["AIAdvisor"]
