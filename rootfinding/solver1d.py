"""Generic bracket search and validation shared by every 1-D solver.

The two entry points build a fresh ``BracketState``, establish a bracket
(by searching outward from a guess, or by validating one supplied by the
caller) and hand it to a ``Refiner`` that narrows it down to a root.
Both return a ``SolverResult``; ``Solver1D`` wraps them for callers that
would rather get a float or an exception.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Protocol

from custom_types.types import Objective
from rootfinding.errors import SolverStatus
from rootfinding.results import SolverResult
from rootfinding.settings import GROWTH_FACTOR, MACHINE_EPSILON, SolverSettings
from rootfinding.state import BracketState

logger = logging.getLogger(__name__)


class Refiner(Protocol):
    """Narrows an established bracket down to a root."""

    name: str

    def refine(self, f: Objective, state: BracketState, accuracy: float) -> SolverResult:
        ...


def _effective_accuracy(accuracy: float) -> float:
    return max(abs(accuracy), MACHINE_EPSILON)


def _search_failure(state: BracketState, method: str) -> SolverResult:
    message = (
        f"unable to bracket root in {state.max_evaluations} function evaluations "
        f"(last bracket attempt: {state.describe()})"
    )
    logger.debug(message)
    return state.fail(SolverStatus.BRACKETING_FAILED, message, method)


def solve_with_step(
        f: Objective,
        accuracy: float,
        guess: float,
        step: float,
        refiner: Refiner,
        settings: SolverSettings = SolverSettings(),
) -> SolverResult:
    """
    Find a root of f starting from ``guess``.

    The bracket is grown geometrically from ``[guess, guess +/- step]``
    until f changes sign, then handed to ``refiner``. Both ends are
    clamped to the enforced bounds, so f is never sampled outside them.
    """
    state = BracketState(settings=settings)
    method = refiner.name
    flipflop = -1

    state.root = guess
    state.fx_max = state.sample(f, state.root)

    # monotonically increasing bias, as in price(volatility)
    if abs(state.fx_max) <= accuracy:
        state.x_min = state.x_max = guess
        state.fx_min = state.fx_max
        return state.converged(guess, method)
    elif state.fx_max > 0.0:
        state.x_min = state.enforce_bounds(state.root - step)
        state.fx_min = state.sample(f, state.x_min)
        state.x_max = state.root
    else:
        state.x_min = state.root
        state.fx_min = state.fx_max
        state.x_max = state.enforce_bounds(state.root + step)
        state.fx_max = state.sample(f, state.x_max)

    while state.has_budget:
        if state.fx_min * state.fx_max <= 0.0:
            if state.fx_min == 0.0:
                return state.converged(state.x_min, method)
            if state.fx_max == 0.0:
                return state.converged(state.x_max, method)
            state.root = 0.5 * (state.x_max + state.x_min)
            logger.debug("Bracketed root after %s evaluations: %s",
                         state.evaluations, state.describe())
            return refiner.refine(f, state, _effective_accuracy(accuracy))

        if abs(state.fx_min) < abs(state.fx_max):
            state.x_min = state.enforce_bounds(
                state.x_min + GROWTH_FACTOR * (state.x_min - state.x_max))
            state.fx_min = state.sample(f, state.x_min)
        elif abs(state.fx_min) > abs(state.fx_max):
            state.x_max = state.enforce_bounds(
                state.x_max + GROWTH_FACTOR * (state.x_max - state.x_min))
            state.fx_max = state.sample(f, state.x_max)
        elif flipflop == -1:
            state.x_min = state.enforce_bounds(
                state.x_min + GROWTH_FACTOR * (state.x_min - state.x_max))
            state.fx_min = state.sample(f, state.x_min)
            # the low-side tie break is charged twice
            state.evaluations += 1
            flipflop = 1
        else:
            state.x_max = state.enforce_bounds(
                state.x_max + GROWTH_FACTOR * (state.x_max - state.x_min))
            state.fx_max = state.sample(f, state.x_max)
            flipflop = -1
        logger.debug("Expanded bracket: %s", state.describe())

    return _search_failure(state, method)


def solve_in_bracket(
        f: Objective,
        accuracy: float,
        guess: float,
        x_min: float,
        x_max: float,
        refiner: Refiner,
        settings: SolverSettings = SolverSettings(),
) -> SolverResult:
    """
    Find a root of f inside ``[x_min, x_max]``, starting from ``guess``.

    The range, the enforced bounds and the guess are all checked before
    f is first evaluated. An endpoint with ``|f| < accuracy`` is returned
    as the root.
    """
    state = BracketState(settings=settings, root=guess, x_min=x_min, x_max=x_max)
    method = refiner.name

    if not x_min < x_max:
        return state.fail(
            SolverStatus.INVALID_RANGE,
            f"invalid range: xMin ({x_min:.12g}) >= xMax ({x_max:.12g})",
            method,
        )
    if settings.low_bound_enforced and x_min < settings.low_bound:
        return state.fail(
            SolverStatus.BOUND_VIOLATION,
            f"xMin ({x_min:.12g}) < enforced low bound ({settings.low_bound:.12g})",
            method,
        )
    if settings.hi_bound_enforced and x_max > settings.hi_bound:
        return state.fail(
            SolverStatus.BOUND_VIOLATION,
            f"xMax ({x_max:.12g}) > enforced hi bound ({settings.hi_bound:.12g})",
            method,
        )
    if not guess > x_min:
        return state.fail(
            SolverStatus.GUESS_OUT_OF_RANGE,
            f"guess ({guess:.12g}) <= xMin ({x_min:.12g})",
            method,
        )
    if not guess < x_max:
        return state.fail(
            SolverStatus.GUESS_OUT_OF_RANGE,
            f"guess ({guess:.12g}) >= xMax ({x_max:.12g})",
            method,
        )

    state.fx_min = state.sample(f, x_min)
    if abs(state.fx_min) < accuracy:
        return state.converged(x_min, method)

    state.fx_max = state.sample(f, x_max)
    if abs(state.fx_max) < accuracy:
        return state.converged(x_max, method)

    if not state.fx_min * state.fx_max < 0.0:
        message = (
            f"root not bracketed: f[{x_min:.12g},{x_max:.12g}] -> "
            f"[{state.fx_min:.20g},{state.fx_max:.20g}]"
        )
        logger.debug(message)
        return state.fail(SolverStatus.ROOT_NOT_BRACKETED, message, method)

    return refiner.refine(f, state, _effective_accuracy(accuracy))


class Solver1D:
    """
    Configured one-dimensional solver.

    Holds only configuration (the refinement strategy and its settings);
    all per-call state lives inside the solve functions.
    """

    def __init__(self, refiner: Refiner, settings: SolverSettings = SolverSettings()):
        self.refiner = refiner
        self.s = settings

    def __repr__(self):
        return f"Solver1D({self.refiner.name}, {self.s})"

    # ========== Configuration ==========

    def set_max_evaluations(self, max_evaluations: int) -> None:
        self.s = replace(self.s, max_evaluations=max_evaluations)

    def set_low_bound(self, low_bound: Optional[float]) -> None:
        """Enforce a lower bound (None disables it)."""
        self.s = replace(self.s, low_bound=low_bound)

    def set_hi_bound(self, hi_bound: Optional[float]) -> None:
        """Enforce an upper bound (None disables it)."""
        self.s = replace(self.s, hi_bound=hi_bound)

    def clear_bounds(self) -> None:
        self.s = replace(self.s, low_bound=None, hi_bound=None)

    # ========== Solving ==========

    def run(self, f: Objective, accuracy: float, guess: float, step: float) -> SolverResult:
        return solve_with_step(f, accuracy, guess, step, self.refiner, self.s)

    def run_bracketed(self, f: Objective, accuracy: float, guess: float,
                      x_min: float, x_max: float) -> SolverResult:
        return solve_in_bracket(f, accuracy, guess, x_min, x_max, self.refiner, self.s)

    def solve(self, f: Objective, accuracy: float, guess: float, step: float) -> float:
        """Root from guess + step search; raises SolverError on failure."""
        return self.run(f, accuracy, guess, step).unwrap()

    def solve_bracketed(self, f: Objective, accuracy: float, guess: float,
                        x_min: float, x_max: float) -> float:
        """Root inside [x_min, x_max]; raises SolverError on failure."""
        return self.run_bracketed(f, accuracy, guess, x_min, x_max).unwrap()
