from dataclasses import dataclass
from typing import Union
import numpy as np

@dataclass(frozen=True)
class EuropeanOptionSpec:
    strike: Union[float, np.ndarray]               # strike on the forward
    expiry: Union[float, np.ndarray]               # time to expiry in years
    is_call: Union[bool, np.ndarray] = True        # False for puts
    quantity: Union[float, np.ndarray] = 1.0       # notional units
