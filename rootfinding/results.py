from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from rootfinding.errors import ERRORS, SolverStatus


@dataclass(frozen=True)
class SolverResult:
    """Outcome of one solve call: either a root or a described failure."""
    status: SolverStatus
    root: Optional[float]
    evaluations: int
    method: str
    message: str = ""
    bracket: Optional[Tuple[float, float]] = None      # last (xMin, xMax)
    f_bracket: Optional[Tuple[float, float]] = None    # f at the bracket ends

    @property
    def ok(self) -> bool:
        return self.status is SolverStatus.CONVERGED

    def unwrap(self) -> float:
        """Return the root, or raise the error matching the failure status."""
        if self.ok:
            return self.root
        raise ERRORS[self.status](self)
