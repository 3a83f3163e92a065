"""
Foreman Exceptions.

All foreman errors are wrapped in ForemanError for consistent handling.
"""

from typing import Any


class ForemanError(Exception):
    """
    Base exception for all Foreman errors.

    Usage:
        raise ForemanError('INVALID_STATUS', current='ACTIVE', expected='PLANNING')

    Attributes:
        code: Error code (VALIDATION_ERROR, NOT_FOUND, CONFLICT, etc.)
        details: Additional context as keyword arguments
    """

    def __init__(self, code: str, **details: Any):
        self.code = code
        self.details = details
        message = f"{code}: {details}" if details else code
        super().__init__(message)

    def as_dict(self) -> dict:
        """Return error as dictionary for API responses."""
        return {"error": self.code, **self.details}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"ForemanError({self.code}: {details_str})"
        return f"ForemanError({self.code})"


class StepGraphError(ForemanError):
    """
    A recipe's step dependency graph is invalid.

    Always carries code VALIDATION_ERROR; ``reason`` tells which rule failed.
    """

    reason = "INVALID_STEP_GRAPH"

    def __init__(self, step: str, message: str, **details: Any):
        self.step = step
        self.message = message
        super().__init__(
            "VALIDATION_ERROR", reason=self.reason, step=step, message=message, **details
        )


class DanglingDependency(StepGraphError):
    """A step depends on an id that is not part of the same recipe."""

    reason = "DANGLING_DEPENDENCY"


class CyclicDependency(StepGraphError):
    """A step is (transitively) its own ancestor."""

    reason = "CYCLIC_DEPENDENCY"


# Error codes
# VALIDATION_ERROR: Invalid input (step graph, missing device type, empty project)
# NOT_FOUND: Product, Recipe or Project does not exist
# CONFLICT: Uniqueness violation or attempt to mutate a snapshot
# INVALID_STATUS: Project status transition not allowed
# INTERNAL_ERROR: Persistence failure
