from dataclasses import dataclass
import warnings
import numpy as np
from custom_types.types import ArrayLike, as_array


@dataclass(frozen=True)
class Forward:
    F: ArrayLike


@dataclass(frozen=True)
class Vol:
    sigma: ArrayLike

    def __post_init__(self):
        """Reject negative vols, warn on zero vols"""
        sigma = as_array(self.sigma)

        if np.any(sigma < 0.0):
            raise ValueError(f"Volatility must be non-negative, got {self.sigma}")

        if np.any(sigma == 0.0):
            warnings.warn(
                f"Zero volatility in {self.sigma}; price collapses to discounted intrinsic.",
                UserWarning,
                stacklevel=2
            )


@dataclass(frozen=True)
class Df:
    r: ArrayLike
