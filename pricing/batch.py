"""Batch implied-volatility engine over a table of option quotes."""

from __future__ import annotations

import logging
import numpy as np
import pandas as pd

from pricing.context import PricingContext
from pricing.contracts import EuropeanOptionSpec
from pricing.implied import BlackImplied
from pricing.market import Forward, Vol, Df

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['forward', 'strike', 'expiry', 'rate', 'price']


class BatchImplied:
    """Solve implied vols row by row, recording failures instead of raising"""

    def __init__(self, implied: BlackImplied | None = None, method: str = "brent",
                 guess: float = 0.2, step: float = 0.05):
        self.implied = implied or BlackImplied()
        self.method = method
        self.guess = guess
        self.step = step

    def solve_quotes(self, quotes: pd.DataFrame) -> pd.DataFrame:
        """
        Implied vol for each quote row.

        Expects columns forward, strike, expiry, rate, price and optionally
        is_call (defaults to True). Returns a copy of ``quotes`` with
        implied_vol, status, evaluations and message columns added.
        """
        missing = [c for c in REQUIRED_COLUMNS if c not in quotes.columns]
        if missing:
            raise ValueError(f"Quotes are missing columns: {missing}")

        if quotes.empty:
            logger.info("No quotes to solve")
            return quotes.assign(implied_vol=[], status=[], evaluations=[], message=[])

        vols, statuses, evaluations, messages = [], [], [], []

        for _, row in quotes.iterrows():
            try:
                ctx = self._build_context(row)
            except ValueError as exc:
                vols.append(np.nan)
                statuses.append('invalid_input')
                evaluations.append(0)
                messages.append(str(exc))
                continue

            result = self.implied.run_vol(
                float(row['price']), ctx, guess=self.guess, step=self.step, method=self.method
            )
            vols.append(result.root if result.ok else np.nan)
            statuses.append(result.status.value)
            evaluations.append(result.evaluations)
            messages.append(result.message)

        results_df = quotes.copy()
        results_df['implied_vol'] = vols
        results_df['status'] = statuses
        results_df['evaluations'] = evaluations
        results_df['message'] = messages

        n_failed = int((results_df['status'] != 'converged').sum())
        if n_failed:
            logger.warning("%s of %s quotes did not produce an implied vol", n_failed, len(results_df))

        return results_df

    def _build_context(self, row: pd.Series) -> PricingContext:
        is_call = bool(row['is_call']) if 'is_call' in row.index else True
        contract = EuropeanOptionSpec(
            strike=float(row['strike']),
            expiry=float(row['expiry']),
            is_call=is_call
        )
        # quoted vol is irrelevant for solving; any positive placeholder works
        return PricingContext(
            contract=contract,
            forward=Forward(F=float(row['forward'])),
            vol=Vol(sigma=self.guess),
            df=Df(r=float(row['rate']))
        )
