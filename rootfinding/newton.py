from dataclasses import dataclass
from typing import Callable, ClassVar, Optional

from custom_types.types import DifferentiableObjective, Objective
from rootfinding.errors import SolverStatus
from rootfinding.results import SolverResult
from rootfinding.state import BracketState, x_resolution

Derivative = Callable[[float], float]


def _resolve_derivative(name: str, supplied: Optional[Derivative],
                        f: DifferentiableObjective) -> Derivative:
    if supplied is not None:
        return supplied
    derivative = getattr(f, "derivative", None)
    if derivative is None:
        raise TypeError(
            f"{name} needs a derivative: pass one to the solver or give the "
            f"objective a derivative(x) method"
        )
    return derivative


@dataclass(frozen=True)
class Newton:
    """
    Plain Newton-Raphson started from ``state.root``.
    Only the function value is charged to the evaluation budget.
    """
    name: ClassVar[str] = "newton"
    derivative: Optional[Derivative] = None

    def refine(self, f: Objective, state: BracketState, accuracy: float) -> SolverResult:
        fprime = _resolve_derivative(self.name, self.derivative, f)
        root = state.root
        froot = state.sample(f, root)
        dfroot = float(fprime(root))
        if abs(froot) <= accuracy:
            return state.converged(root, self.name)

        while state.has_budget:
            if dfroot == 0.0:
                return state.fail(
                    SolverStatus.DIVERGED,
                    f"{self.name}: zero derivative at x={root:.12g}, f(x)={froot:.12g}",
                    self.name, root=root,
                )
            dx = froot / dfroot
            root -= dx
            state.root = root
            if (state.x_min - root) * (root - state.x_max) < 0.0:
                return state.fail(
                    SolverStatus.DIVERGED,
                    f"{self.name}: root jumped out of range: x={root:.12g} "
                    f"outside [{state.x_min:.12g},{state.x_max:.12g}]",
                    self.name, root=root,
                )
            froot = state.sample(f, root)
            dfroot = float(fprime(root))
            if abs(froot) <= accuracy:
                return state.converged(root, self.name)
            if abs(dx) <= x_resolution(root):
                return state.collapsed(root, froot, self.name, accuracy)
        return state.exhausted(self.name)


@dataclass(frozen=True)
class NewtonSafe:
    """Newton-Raphson that falls back to bisection when a step would leave
    the bracket or shrink it too slowly."""
    name: ClassVar[str] = "newton_safe"
    derivative: Optional[Derivative] = None

    def refine(self, f: Objective, state: BracketState, accuracy: float) -> SolverResult:
        fprime = _resolve_derivative(self.name, self.derivative, f)

        # orient so that f(x_low) < 0 < f(x_high)
        if state.fx_min < 0.0:
            x_low, x_high = state.x_min, state.x_max
        else:
            x_low, x_high = state.x_max, state.x_min

        dx_old = abs(state.x_max - state.x_min)
        dx = dx_old
        root = state.root
        froot = state.sample(f, root)
        dfroot = float(fprime(root))
        if abs(froot) <= accuracy:
            return state.converged(root, self.name)

        while state.has_budget:
            out_of_range = ((root - x_high) * dfroot - froot) * ((root - x_low) * dfroot - froot) > 0.0
            too_slow = abs(2.0 * froot) > abs(dx_old * dfroot)
            dx_old = dx
            if out_of_range or too_slow:
                dx = 0.5 * (x_high - x_low)
                root = x_low + dx
            else:
                dx = froot / dfroot
                root -= dx
            state.root = root

            froot = state.sample(f, root)
            dfroot = float(fprime(root))
            if abs(froot) <= accuracy:
                return state.converged(root, self.name)
            if froot < 0.0:
                x_low = root
            else:
                x_high = root
            state.shrink(root, froot)
            if abs(dx) <= x_resolution(root):
                return state.collapsed(root, froot, self.name, accuracy)
        return state.exhausted(self.name)
