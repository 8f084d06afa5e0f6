"""
Flat-rate analysis of a string of cash flows: NPV and internal rate of return.

Cash flows are given as amounts paid at times (in years) from the
settlement date; flows at negative times are ignored as already paid.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

import numpy as np

from custom_types.types import ArrayLike, FloatArray, as_1d
from rootfinding.factory import make_refiner
from rootfinding.settings import SolverSettings
from rootfinding.solver1d import Solver1D

logger = logging.getLogger(__name__)


class Compounding(Enum):
    SIMPLE = "simple"            # 1 + r t
    COMPOUNDED = "compounded"    # (1 + r / n) ** (n t)
    CONTINUOUS = "continuous"    # exp(r t)


def _live_flows(amounts: ArrayLike, times: ArrayLike):
    amounts, times = as_1d(amounts), as_1d(times)
    if amounts.shape != times.shape:
        raise ValueError(
            f"amounts and times must have the same length, got {len(amounts)} and {len(times)}"
        )
    alive = times >= 0.0
    return amounts[alive], times[alive]


def discount_factors(rate: float, times: ArrayLike,
                     compounding: Compounding = Compounding.COMPOUNDED,
                     frequency: int = 1) -> FloatArray:
    times = as_1d(times)
    if compounding is Compounding.SIMPLE:
        return 1.0 / (1.0 + rate * times)
    if compounding is Compounding.COMPOUNDED:
        if frequency < 1:
            raise ValueError(f"frequency must be at least 1, got {frequency}")
        return (1.0 + rate / frequency) ** (-frequency * times)
    return np.exp(-rate * times)


def _discount_derivatives(rate: float, times: FloatArray, compounding: Compounding,
                          frequency: int) -> FloatArray:
    """d(discount factor)/d(rate) for each time."""
    if compounding is Compounding.SIMPLE:
        return -times / (1.0 + rate * times) ** 2
    if compounding is Compounding.COMPOUNDED:
        return -times * (1.0 + rate / frequency) ** (-frequency * times - 1.0)
    return -times * np.exp(-rate * times)


def npv(amounts: ArrayLike, times: ArrayLike, rate: float,
        compounding: Compounding = Compounding.COMPOUNDED, frequency: int = 1) -> float:
    """Sum of the cash flows discounted at the flat ``rate``."""
    amounts, times = _live_flows(amounts, times)
    return float(np.sum(amounts * discount_factors(rate, times, compounding, frequency)))


class IrrObjective:
    """NPV(rate) - market price, with its analytic derivative in the rate."""

    def __init__(self, amounts: ArrayLike, times: ArrayLike, market_price: float,
                 compounding: Compounding = Compounding.COMPOUNDED, frequency: int = 1):
        self.amounts, self.times = _live_flows(amounts, times)
        self.market_price = market_price
        self.compounding = compounding
        self.frequency = frequency

    def __call__(self, rate: float) -> float:
        df = discount_factors(rate, self.times, self.compounding, self.frequency)
        return float(np.sum(self.amounts * df)) - self.market_price

    def derivative(self, rate: float) -> float:
        ddf = _discount_derivatives(rate, self.times, self.compounding, self.frequency)
        return float(np.sum(self.amounts * ddf))


def _sign_changes(values: FloatArray) -> int:
    signs = np.sign(values[values != 0.0])
    return int(np.count_nonzero(signs[1:] != signs[:-1]))


def irr(amounts: ArrayLike, times: ArrayLike, market_price: float,
        compounding: Compounding = Compounding.COMPOUNDED, frequency: int = 1,
        tolerance: float = 1.0e-10, max_evaluations: int = 10000,
        guess: float = 0.05, method: str = "brent") -> float:
    """
    Internal rate of return: the flat rate at which the NPV of the flows
    equals ``market_price``.

    Descartes' rule of signs is used to check that an IRR can exist
    before searching for it: the flows ``(-price, c1, ..., cn)`` ordered
    by time must change sign at least once.
    """
    obj = IrrObjective(amounts, times, market_price, compounding, frequency)
    order = np.argsort(obj.times, kind="stable")
    flows = np.concatenate(([-market_price], obj.amounts[order]))
    if _sign_changes(flows) == 0:
        raise ValueError(
            "the given cash flows cannot result in the given market price due to their sign"
        )

    # rates at or below -1 (or -n for n-times compounding) make the discount factor blow up
    low_bound: Optional[float] = None
    if compounding is Compounding.COMPOUNDED:
        low_bound = -frequency + 1e-8
    elif compounding is Compounding.SIMPLE:
        low_bound = -1.0 / float(np.max(obj.times, initial=1.0)) + 1e-8

    solver = Solver1D(
        make_refiner(method),
        SolverSettings(max_evaluations=max_evaluations, low_bound=low_bound)
    )
    step = guess / 10.0 if guess != 0.0 else 0.005
    logger.debug("Solving IRR for %s flows with %s, guess=%s", len(obj.amounts), method, guess)
    return solver.solve(obj, tolerance, guess, step)
