# utils/states.py

from dataclasses import dataclass
from typing import Optional


@dataclass
class IterationRecord:
    timestep: int  # outer loop counter
    picard_iteration: int  # inner loop counter
    step_index: int  # index handed to the transport solver
    residual: Optional[float]  # max relative change of region temperatures, None on the first iteration
