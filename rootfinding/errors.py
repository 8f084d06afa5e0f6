"""Failure kinds of the one-dimensional solver and their exceptions."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Dict, Type

if TYPE_CHECKING:
    from rootfinding.results import SolverResult


class SolverStatus(Enum):
    CONVERGED = "converged"
    INVALID_RANGE = "invalid_range"
    BOUND_VIOLATION = "bound_violation"
    GUESS_OUT_OF_RANGE = "guess_out_of_range"
    ROOT_NOT_BRACKETED = "root_not_bracketed"
    BRACKETING_FAILED = "bracketing_failed"
    MAX_EVALUATIONS_EXCEEDED = "max_evaluations_exceeded"
    DIVERGED = "diverged"
    ACCURACY_NOT_REACHED = "accuracy_not_reached"


class SolverError(ValueError):
    """Raised when a solve call does not produce a root.

    The failed ``SolverResult`` is kept on the exception so callers can
    inspect the last bracket and the evaluation count.
    """

    def __init__(self, result: SolverResult):
        super().__init__(result.message)
        self.result = result

    @property
    def status(self) -> SolverStatus:
        return self.result.status


class InvalidRangeError(SolverError):
    """xMin >= xMax in the explicit-bracket entry point."""


class BoundViolationError(SolverError):
    """Supplied bracket lies outside an enforced bound."""


class GuessOutOfRangeError(SolverError):
    """Guess is not strictly inside (xMin, xMax)."""


class RootNotBracketedError(SolverError):
    """Explicit bracket endpoints have the same sign."""


class BracketingFailedError(SolverError):
    """Guess/step search ran out of evaluations before finding a sign change."""


class MaxEvaluationsExceededError(SolverError):
    """Refinement ran out of evaluations before reaching the accuracy."""


class DivergenceError(SolverError):
    """Open iteration left the bracket or hit a flat slope."""


class AccuracyNotReachedError(SolverError):
    """Bracket collapsed to floating-point resolution with |f| still above the accuracy."""


ERRORS: Dict[SolverStatus, Type[SolverError]] = {
    SolverStatus.INVALID_RANGE: InvalidRangeError,
    SolverStatus.BOUND_VIOLATION: BoundViolationError,
    SolverStatus.GUESS_OUT_OF_RANGE: GuessOutOfRangeError,
    SolverStatus.ROOT_NOT_BRACKETED: RootNotBracketedError,
    SolverStatus.BRACKETING_FAILED: BracketingFailedError,
    SolverStatus.MAX_EVALUATIONS_EXCEEDED: MaxEvaluationsExceededError,
    SolverStatus.DIVERGED: DivergenceError,
    SolverStatus.ACCURACY_NOT_REACHED: AccuracyNotReachedError,
}
