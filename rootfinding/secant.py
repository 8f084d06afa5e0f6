from dataclasses import dataclass
from typing import ClassVar

from custom_types.types import Objective
from rootfinding.errors import SolverStatus
from rootfinding.results import SolverResult
from rootfinding.state import BracketState, x_resolution


@dataclass(frozen=True)
class Secant:
    """
    Secant iteration started from the bracket endpoint with the smaller
    |f|. Unlike false position the two secant points need not straddle
    the root, so the bracket is tracked separately: every sample shrinks
    it, and a candidate outside it is replaced by the bracket midpoint.
    Samples therefore stay inside the enforced bounds too.
    """
    name: ClassVar[str] = "secant"

    def refine(self, f: Objective, state: BracketState, accuracy: float) -> SolverResult:
        if abs(state.fx_min) < abs(state.fx_max):
            root, froot = state.x_min, state.fx_min
            x_last, f_last = state.x_max, state.fx_max
        else:
            root, froot = state.x_max, state.fx_max
            x_last, f_last = state.x_min, state.fx_min

        while state.has_budget:
            if froot == f_last:
                return state.fail(
                    SolverStatus.DIVERGED,
                    f"{self.name}: flat secant between x={x_last:.12g} and "
                    f"x={root:.12g} (f={froot:.12g})",
                    self.name, root=root,
                )
            dx = (x_last - root) * froot / (froot - f_last)
            x_last, f_last = root, froot
            if (state.x_min - root - dx) * (root + dx - state.x_max) < 0.0:
                # candidate outside the bracket: bisect instead
                dx = 0.5 * (state.x_min + state.x_max) - root
            root += dx
            froot = state.sample(f, root)
            state.root = root
            if abs(froot) <= accuracy:
                return state.converged(root, self.name)
            state.shrink(root, froot)
            if abs(dx) <= x_resolution(root):
                return state.collapsed(root, froot, self.name, accuracy)
        return state.exhausted(self.name)
