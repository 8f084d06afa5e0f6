from dataclasses import dataclass
from typing import Optional

import numpy as np

MACHINE_EPSILON = float(np.finfo(float).eps)
GROWTH_FACTOR = 1.6      # bracket expansion per step during the search


@dataclass(frozen=True)
class SolverSettings:
    max_evaluations: int = 100
    low_bound: Optional[float] = None    # None: lower bound not enforced
    hi_bound: Optional[float] = None     # None: upper bound not enforced

    def __post_init__(self):
        if self.max_evaluations < 1:
            raise ValueError(
                f"max_evaluations must be at least 1, got {self.max_evaluations}"
            )
        if (self.low_bound is not None and self.hi_bound is not None
                and self.low_bound > self.hi_bound):
            raise ValueError(
                f"Enforced low bound ({self.low_bound}) is above "
                f"enforced hi bound ({self.hi_bound})"
            )

    @property
    def low_bound_enforced(self) -> bool:
        return self.low_bound is not None

    @property
    def hi_bound_enforced(self) -> bool:
        return self.hi_bound is not None

    def enforce_bounds(self, x: float) -> float:
        """Clamp x into the enforced domain."""
        if self.low_bound is not None and x < self.low_bound:
            return self.low_bound
        if self.hi_bound is not None and x > self.hi_bound:
            return self.hi_bound
        return x
