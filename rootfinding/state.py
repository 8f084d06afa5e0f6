"""Mutable bookkeeping for a single solve call.

A ``BracketState`` is created at the start of every solve call, threaded
through the bracket search and the refinement step, and dropped when the
call returns. Nothing here lives on the solver object, so one solver can
serve many calls (and threads) at once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from custom_types.types import Objective
from rootfinding.errors import SolverStatus
from rootfinding.results import SolverResult
from rootfinding.settings import MACHINE_EPSILON, SolverSettings


def x_resolution(x: float) -> float:
    """Smallest step near x that still moves the iterate."""
    return 2.0 * MACHINE_EPSILON * abs(x) + 0.5 * MACHINE_EPSILON


@dataclass
class BracketState:
    settings: SolverSettings = field(default_factory=SolverSettings)
    root: float = 0.0
    x_min: float = 0.0
    x_max: float = 0.0
    fx_min: float = 0.0
    fx_max: float = 0.0
    evaluations: int = 0

    @property
    def max_evaluations(self) -> int:
        return self.settings.max_evaluations

    @property
    def has_budget(self) -> bool:
        return self.evaluations <= self.settings.max_evaluations

    def sample(self, f: Objective, x: float) -> float:
        """Evaluate f at x, counting the call against the budget."""
        self.evaluations += 1
        return float(f(x))

    def enforce_bounds(self, x: float) -> float:
        return self.settings.enforce_bounds(x)

    def shrink(self, x: float, fx: float) -> None:
        """Move the endpoint sharing the sign of fx to x."""
        if (fx < 0.0) == (self.fx_min < 0.0):
            self.x_min, self.fx_min = x, fx
        else:
            self.x_max, self.fx_max = x, fx

    def describe(self) -> str:
        return (f"f[{self.x_min:.12g},{self.x_max:.12g}] -> "
                f"[{self.fx_min:.12g},{self.fx_max:.12g}]")

    # ========== Results ==========

    def converged(self, x: float, method: str) -> SolverResult:
        return SolverResult(
            status=SolverStatus.CONVERGED,
            root=x,
            evaluations=self.evaluations,
            method=method,
            bracket=(self.x_min, self.x_max),
            f_bracket=(self.fx_min, self.fx_max),
        )

    def fail(self, status: SolverStatus, message: str, method: str,
             root: Optional[float] = None) -> SolverResult:
        return SolverResult(
            status=status,
            root=root,
            evaluations=self.evaluations,
            method=method,
            message=message,
            bracket=(self.x_min, self.x_max),
            f_bracket=(self.fx_min, self.fx_max),
        )

    def collapsed(self, x: float, fx: float, method: str, accuracy: float) -> SolverResult:
        """
        Result once the bracket (or step) is below ``x_resolution``.

        The best sampled point is a root only if it meets the accuracy;
        otherwise f jumps across the collapsed bracket.
        """
        x, fx = min((x, fx), (self.x_min, self.fx_min), (self.x_max, self.fx_max),
                    key=lambda point: abs(point[1]))
        self.root = x
        if abs(fx) <= accuracy:
            return self.converged(x, method)
        return self.fail(
            SolverStatus.ACCURACY_NOT_REACHED,
            f"{method}: accuracy {accuracy:.6g} cannot be reached, bracket collapsed "
            f"to {self.describe()} with f({x:.17g}) = {fx:.12g}",
            method, root=x,
        )

    def exhausted(self, method: str) -> SolverResult:
        return self.fail(
            SolverStatus.MAX_EVALUATIONS_EXCEEDED,
            f"{method}: maximum number of function evaluations "
            f"({self.max_evaluations}) exceeded (last bracket: {self.describe()}, "
            f"last root estimate {self.root:.12g})",
            method,
        )
