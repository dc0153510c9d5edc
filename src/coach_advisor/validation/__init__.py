from .forecast import ForecastValidationService

__all__ = ["ForecastValidationService"]
