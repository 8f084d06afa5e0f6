from typing import Callable, Optional

from rootfinding.bracketed import Bisection, FalsePosition, Ridder
from rootfinding.brent import Brent, ScipyBrentq
from rootfinding.newton import Newton, NewtonSafe
from rootfinding.secant import Secant
from rootfinding.settings import SolverSettings
from rootfinding.solver1d import Refiner, Solver1D

Derivative = Callable[[float], float]

_REFINERS = {
    "bisection": Bisection,
    "false_position": FalsePosition,
    "secant": Secant,
    "ridder": Ridder,
    "brent": Brent,
    "brentq": ScipyBrentq,
}

_DERIVATIVE_REFINERS = {
    "newton": Newton,
    "newton_safe": NewtonSafe,
}


def available_methods() -> list:
    return sorted([*_REFINERS, *_DERIVATIVE_REFINERS])


def make_refiner(name: str, derivative: Optional[Derivative] = None) -> Refiner:
    """
    Build a refinement strategy by name.

    ``derivative`` is only used by the Newton variants; without it they
    fall back to the objective's own ``derivative`` method.
    """
    key = name.lower()
    if key in _DERIVATIVE_REFINERS:
        return _DERIVATIVE_REFINERS[key](derivative=derivative)
    if key in _REFINERS:
        return _REFINERS[key]()
    raise ValueError(
        f"Unknown solver method '{name}'. Available: {', '.join(available_methods())}"
    )


def make_solver(name: str = "brent", settings: SolverSettings = SolverSettings(),
                derivative: Optional[Derivative] = None) -> Solver1D:
    return Solver1D(make_refiner(name, derivative), settings)
