from __future__ import annotations
from pricing.context import PricingContext
from pricing.black import BlackPricer
from rootfinding.factory import make_refiner
from rootfinding.results import SolverResult
from rootfinding.settings import SolverSettings
from rootfinding.solver1d import Solver1D

VOL_FLOOR = 0.0
VOL_CAP = 5.0


class VolObjective:
    """price(sigma) - target for a scalar context, with vega as derivative."""

    def __init__(self, pricer: BlackPricer, ctx: PricingContext, target_price: float):
        self.pricer = pricer
        self.ctx = ctx
        self.target_price = target_price

    def __call__(self, sigma: float) -> float:
        return self.pricer.price_with_vol(self.ctx, sigma) - self.target_price

    def derivative(self, sigma: float) -> float:
        return self.pricer.vega(self.ctx, sigma)


class BlackImplied:
    def __init__(self, pricer: BlackPricer | None = None,
                 settings: SolverSettings | None = None, accuracy: float = 1e-10):
        self.pricer = pricer or BlackPricer()
        self.settings = settings or SolverSettings(low_bound=VOL_FLOOR, hi_bound=VOL_CAP)
        self.accuracy = accuracy

    def _solver(self, method: str) -> Solver1D:
        return Solver1D(make_refiner(method), self.settings)

    def run_vol(self, target_price: float, ctx: PricingContext, guess: float = 0.2,
                step: float = 0.05, method: str = "brent") -> SolverResult:
        """Implied vol as a tagged result (never raises for solver failures)."""
        f = VolObjective(self.pricer, ctx, target_price)
        return self._solver(method).run(f, self.accuracy, guess, step)

    def solve_vol(self, target_price: float, ctx: PricingContext, guess: float = 0.2,
                  step: float = 0.05, method: str = "brent") -> float:
        return self.run_vol(target_price, ctx, guess, step, method).unwrap()

    def solve_vol_bracketed(self, target_price: float, ctx: PricingContext,
                            vol_min: float = 1e-4, vol_max: float = VOL_CAP,
                            guess: float = 0.2, method: str = "brent") -> float:
        f = VolObjective(self.pricer, ctx, target_price)
        return self._solver(method).solve_bracketed(f, self.accuracy, guess, vol_min, vol_max)
