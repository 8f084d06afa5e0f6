from dataclasses import dataclass
import numpy as np
from pricing.contracts import EuropeanOptionSpec
from pricing.market import Forward, Vol, Df
from custom_types.types import ArrayLike, as_array


@dataclass(frozen=True)
class PricingContext:
    contract: EuropeanOptionSpec
    forward: Forward
    vol: Vol
    df: Df

    def __post_init__(self):
        """Validate inputs and that all vector inputs have consistent lengths"""
        if np.any(as_array(self.contract.expiry) < 0.0):
            raise ValueError(f"Expiry must be non-negative, got {self.contract.expiry}")
        if np.any(as_array(self.forward.F) <= 0.0):
            raise ValueError(f"Forward must be positive, got {self.forward.F}")
        if np.any(as_array(self.contract.strike) <= 0.0):
            raise ValueError(f"Strike must be positive, got {self.contract.strike}")

        lengths = []
        named_values = [
            ('contract.strike', self.contract.strike),
            ('contract.expiry', self.contract.expiry),
            ('contract.is_call', self.contract.is_call),
            ('contract.quantity', self.contract.quantity),
            ('forward.F', self.forward.F),
            ('vol.sigma', self.vol.sigma),
            ('df.r', self.df.r),
        ]
        for name, val in named_values:
            arr = np.asarray(val)
            if arr.ndim > 0:
                lengths.append((name, len(arr)))

        # Check if all lengths are the same
        if lengths:
            unique_lengths = set(length for _, length in lengths)
            if len(unique_lengths) > 1:
                length_details = ', '.join([f'{name}={length}' for name, length in lengths])
                raise ValueError(
                    f"Inconsistent vector lengths in PricingContext. "
                    f"All arrays must have the same length. Found: {length_details}"
                )

    @property
    def T(self) -> ArrayLike:
        return self.contract.expiry
