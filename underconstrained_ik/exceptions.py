"""Errors raised at configuration and goal-extraction time.

Per-rollout failures (missing Jacobian, exhausted iteration budget) are not
exceptions; they are reported through ``IKStatus`` on the solve result.

This module imports nothing from the rest of the package so the type
modules can raise these errors from their own validators.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Error code reported back to the planning request caller."""

    SUCCESS = "success"
    INVALID_GOAL_CONSTRAINTS = "invalid_goal_constraints"
    INVALID_CONFIGURATION = "invalid_configuration"


class UnderconstrainedIKError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(UnderconstrainedIKError, ValueError):
    """Malformed or missing solver configuration."""

    def __init__(self, problems: list[str] | str) -> None:
        if isinstance(problems, str):
            problems = [problems]
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class GoalExtractionError(UnderconstrainedIKError):
    """The motion plan request does not describe a usable goal."""

    def __init__(
        self, message: str, error_code: ErrorCode = ErrorCode.INVALID_GOAL_CONSTRAINTS
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
