"""Input validation for the planners."""

from lifetracker.validation.validator import PlanValidator

__all__ = ["PlanValidator"]
