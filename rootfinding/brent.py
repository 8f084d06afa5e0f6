import logging
import math
from dataclasses import dataclass, replace
from typing import ClassVar

from scipy import optimize

from custom_types.types import Objective
from rootfinding.results import SolverResult
from rootfinding.settings import MACHINE_EPSILON
from rootfinding.state import BracketState, x_resolution

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Brent:
    """
    Brent's method: inverse quadratic interpolation, falling back to
    bisection whenever the interpolated step is not trustworthy.

    ``state.root`` is the current best estimate, ``state.x_max`` the
    contrapoint (opposite sign), ``state.x_min`` the previous estimate.
    """
    name: ClassVar[str] = "brent"

    def refine(self, f: Objective, state: BracketState, accuracy: float) -> SolverResult:
        root = state.root
        froot = state.sample(f, root)
        if abs(froot) <= accuracy:
            return state.converged(root, self.name)

        # pick the contrapoint so that [root, x_max] brackets the zero
        if froot * state.fx_min < 0.0:
            state.x_max, state.fx_max = state.x_min, state.fx_min
        else:
            state.x_min, state.fx_min = state.x_max, state.fx_max
        d = root - state.x_max
        e = d

        while state.has_budget:
            if (froot > 0.0 and state.fx_max > 0.0) or (froot < 0.0 and state.fx_max < 0.0):
                state.x_max, state.fx_max = state.x_min, state.fx_min
                d = root - state.x_min
                e = d
            if abs(state.fx_max) < abs(froot):
                state.x_min, state.fx_min = root, froot
                root, froot = state.x_max, state.fx_max
                state.x_max, state.fx_max = state.x_min, state.fx_min
            state.root = root

            x_tol = x_resolution(root)
            x_mid = 0.5 * (state.x_max - root)
            if abs(froot) <= accuracy:
                return state.converged(root, self.name)
            if abs(x_mid) <= x_tol:
                return state.collapsed(root, froot, self.name, accuracy)

            if abs(e) >= x_tol and abs(state.fx_min) > abs(froot):
                s = froot / state.fx_min
                if state.x_min == state.x_max:
                    # secant
                    p = 2.0 * x_mid * s
                    q = 1.0 - s
                else:
                    # inverse quadratic interpolation
                    q = state.fx_min / state.fx_max
                    r = froot / state.fx_max
                    p = s * (2.0 * x_mid * q * (q - r) - (root - state.x_min) * (r - 1.0))
                    q = (q - 1.0) * (r - 1.0) * (s - 1.0)
                if p > 0.0:
                    q = -q
                p = abs(p)
                min1 = 3.0 * x_mid * q - abs(x_tol * q)
                min2 = abs(e * q)
                if 2.0 * p < min(min1, min2):
                    e = d
                    d = p / q
                else:
                    d = x_mid
                    e = d
            else:
                d = x_mid
                e = d

            state.x_min, state.fx_min = root, froot
            root += d if abs(d) > x_tol else math.copysign(x_tol, x_mid)
            froot = state.sample(f, root)
            state.root = root
            if abs(froot) <= accuracy:
                return state.converged(root, self.name)
        return state.exhausted(self.name)


@dataclass(frozen=True)
class ScipyBrentq:
    """
    Hands the established bracket to ``scipy.optimize.brentq``.

    scipy stops on an x tolerance, so its root is only accepted when
    |f(root)| meets the accuracy. Otherwise every point scipy sampled is
    used to narrow the bracket and :class:`Brent` finishes the job on the
    remaining budget. All calls are charged to the same evaluation counter.
    """
    name: ClassVar[str] = "brentq"
    rtol: float = 4.0 * MACHINE_EPSILON

    def refine(self, f: Objective, state: BracketState, accuracy: float) -> SolverResult:
        # scipy re-samples both ends before its first iteration
        remaining = state.max_evaluations - state.evaluations - 2
        if remaining < 1:
            return self._polish(f, state, accuracy)

        samples = []

        def sampled(x):
            fx = state.sample(f, x)
            samples.append((x, fx))
            return fx

        a, b = sorted((state.x_min, state.x_max))
        root, info = optimize.brentq(
            sampled, a, b,
            xtol=accuracy, rtol=self.rtol, maxiter=remaining,
            full_output=True, disp=False,
        )
        for x, fx in samples:
            if fx != 0.0:
                state.shrink(x, fx)
        state.root = root

        froot = next((fx for x, fx in reversed(samples) if x == root), None)
        if info.converged and froot is not None and abs(froot) <= accuracy:
            return state.converged(root, self.name)
        logger.debug("brentq stopped at x=%r outside the accuracy, polishing %s",
                     root, state.describe())
        return self._polish(f, state, accuracy)

    def _polish(self, f: Objective, state: BracketState, accuracy: float) -> SolverResult:
        return replace(Brent().refine(f, state, accuracy), method=self.name)
