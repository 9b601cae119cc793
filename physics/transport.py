# physics/transport.py
# contract of the neutron transport driver seen by the couplers

from abc import ABC, abstractmethod
from typing import Hashable, List, Sequence, Tuple
import numpy as np


class TransportDriver(ABC):
    """
    Neutron transport solver wrapped for the coupling.

    Regions returned by region_for_point are opaque tokens: two tokens describing the
    same region must compare (and hash) equal even if they are distinct objects.
    Per-region arrays (heat source, tallies) follow the order of self.regions, which is
    fixed once by attach_regions.
    """

    def __init__(self, comm):
        self.comm = comm
        self.regions: List[Hashable] = []

    def attach_regions(self, regions: Sequence[Hashable]):
        self.regions = list(regions)

    def active(self) -> bool:
        return True

    @abstractmethod
    def begin_step(self):
        pass

    @abstractmethod
    def solve_step(self, step_index: int):
        pass

    @abstractmethod
    def end_step(self):
        pass

    @abstractmethod
    def region_for_point(self, point: Tuple[float, float, float]) -> Hashable:
        pass

    @abstractmethod
    def material_index(self, region: Hashable) -> int:
        pass

    @abstractmethod
    def create_tallies(self, material_indices: Sequence[int]):
        pass

    @abstractmethod
    def heat_source(self, power: float) -> np.ndarray:
        """
        Heat generation rate of each region [W/m^3], normalized to the total power [W].
        """
        pass

    @abstractmethod
    def set_region_temperature(self, region: Hashable, temperature: float):
        pass
