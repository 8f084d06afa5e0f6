"""Refinement steps that only ever sample inside the current bracket."""

import math
from dataclasses import dataclass
from typing import ClassVar

from custom_types.types import Objective
from rootfinding.results import SolverResult
from rootfinding.state import BracketState, x_resolution


@dataclass(frozen=True)
class Bisection:
    name: ClassVar[str] = "bisection"

    def refine(self, f: Objective, state: BracketState, accuracy: float) -> SolverResult:
        while state.has_budget:
            x_mid = 0.5 * (state.x_min + state.x_max)
            fx_mid = state.sample(f, x_mid)
            state.root = x_mid
            if abs(fx_mid) <= accuracy:
                return state.converged(x_mid, self.name)
            state.shrink(x_mid, fx_mid)
            if abs(state.x_max - state.x_min) <= x_resolution(x_mid):
                return state.collapsed(x_mid, fx_mid, self.name, accuracy)
        return state.exhausted(self.name)


@dataclass(frozen=True)
class FalsePosition:
    """Regula falsi: secant through the two bracketing points."""
    name: ClassVar[str] = "false_position"

    def refine(self, f: Objective, state: BracketState, accuracy: float) -> SolverResult:
        previous = math.inf
        while state.has_budget:
            root = state.x_min + (state.x_max - state.x_min) * state.fx_min / (
                state.fx_min - state.fx_max)
            froot = state.sample(f, root)
            state.root = root
            if abs(froot) <= accuracy:
                return state.converged(root, self.name)
            state.shrink(root, froot)
            if abs(root - previous) <= x_resolution(root):
                return state.collapsed(root, froot, self.name, accuracy)
            previous = root
        return state.exhausted(self.name)


@dataclass(frozen=True)
class Ridder:
    """Ridders' method: exponential fit through the endpoints and midpoint."""
    name: ClassVar[str] = "ridder"

    def refine(self, f: Objective, state: BracketState, accuracy: float) -> SolverResult:
        while state.has_budget:
            x_mid = 0.5 * (state.x_min + state.x_max)
            fx_mid = state.sample(f, x_mid)
            state.root = x_mid
            if abs(fx_mid) <= accuracy:
                return state.converged(x_mid, self.name)

            s = math.sqrt(fx_mid * fx_mid - state.fx_min * state.fx_max)
            if s == 0.0:
                return state.collapsed(x_mid, fx_mid, self.name, accuracy)
            direction = 1.0 if state.fx_min >= state.fx_max else -1.0
            root = x_mid + (x_mid - state.x_min) * direction * fx_mid / s

            froot = state.sample(f, root)
            state.root = root
            if abs(froot) <= accuracy:
                return state.converged(root, self.name)

            # keep whichever pair of points still straddles the root
            if math.copysign(fx_mid, froot) != fx_mid:
                state.x_min, state.fx_min = x_mid, fx_mid
                state.x_max, state.fx_max = root, froot
            else:
                state.shrink(root, froot)

            if abs(state.x_max - state.x_min) <= x_resolution(root):
                return state.collapsed(root, froot, self.name, accuracy)
        return state.exhausted(self.name)
