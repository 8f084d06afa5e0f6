from dataclasses import dataclass
import numpy as np
from scipy.stats import norm
from pricing.context import PricingContext
from typing import Union


@dataclass(frozen=True)
class BlackSettings:
    eps_sigma: float = 1e-12  # below this total vol the price is the discounted intrinsic


class BlackPricer:
    def __init__(self, settings: BlackSettings = BlackSettings()):
        self.s = settings

    def price(self, ctx: PricingContext) -> Union[float, np.ndarray]:
        """
        Price European option(s) on a forward, per unit of notional.
        Returns float for single option, np.ndarray for strip.
        """
        return self.price_with_vol(ctx, ctx.vol.sigma)

    def price_with_vol(self, ctx: PricingContext,
                       sigma: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Price the context's option(s) with ``sigma`` in place of the quoted vol."""
        return self._price_impl(
            F=ctx.forward.F,
            K=ctx.contract.strike,
            sigma=sigma,
            T=ctx.T,
            r=ctx.df.r,
            is_call=ctx.contract.is_call
        )

    def vega(self, ctx: PricingContext,
             sigma: Union[float, np.ndarray, None] = None) -> Union[float, np.ndarray]:
        """dPrice/dSigma, zero where the total vol is below eps_sigma."""
        sigma = ctx.vol.sigma if sigma is None else sigma
        F, K, T, r = ctx.forward.F, ctx.contract.strike, ctx.T, ctx.df.r
        is_scalar = np.isscalar(F) and np.isscalar(sigma)

        total_vol = np.asarray(sigma * np.sqrt(T), dtype=np.float64)
        safe_vol = np.where(total_vol < self.s.eps_sigma, 1.0, total_vol)
        d1 = (np.log(F / K) + 0.5 * safe_vol ** 2) / safe_vol
        result = np.where(
            total_vol < self.s.eps_sigma,
            0.0,
            np.exp(-r * T) * F * norm.pdf(d1) * np.sqrt(T)
        )

        return float(result) if is_scalar else result

    def _price_impl(
            self,
            F: Union[float, np.ndarray],
            K: Union[float, np.ndarray],
            sigma: Union[float, np.ndarray],
            T: Union[float, np.ndarray],
            r: Union[float, np.ndarray],
            is_call: Union[bool, np.ndarray]
    ) -> Union[float, np.ndarray]:
        """
        Black-76 formula. Adapted for np array for vectorization.
        """
        is_scalar = np.isscalar(F) and np.isscalar(sigma)

        discount = np.exp(-r * T)
        omega = np.where(is_call, 1.0, -1.0)   # +1 call, -1 put
        total_vol = np.asarray(sigma * np.sqrt(T), dtype=np.float64)

        # handle near zero vol explosion
        intrinsic_fwd = np.maximum(omega * (F - K), 0.0)
        safe_vol = np.where(total_vol < self.s.eps_sigma, 1.0, total_vol)

        result = np.where(
            total_vol < self.s.eps_sigma,
            discount * intrinsic_fwd,
            self._black_formula(F, K, safe_vol, discount, omega)
        )

        return float(result) if is_scalar else result

    def _black_formula(
            self,
            F: Union[float, np.ndarray],
            K: Union[float, np.ndarray],
            total_vol: Union[float, np.ndarray],
            discount: Union[float, np.ndarray],
            omega: Union[float, np.ndarray]
    ) -> Union[float, np.ndarray]:
        d1 = (np.log(F / K) + 0.5 * total_vol ** 2) / total_vol
        d2 = d1 - total_vol
        return discount * omega * (F * norm.cdf(omega * d1) - K * norm.cdf(omega * d2))
