"""Service module exports."""

from . import eligibility, habits, reports

__all__ = ["eligibility", "habits", "reports"]
