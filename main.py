"""Convenience entry point for the coach-advisor CLI."""

from coach_advisor.cli import main


if __name__ == "__main__":
    main()
