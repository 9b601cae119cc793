# physics/conduction.py
# contract of the heat conduction driver seen by the couplers

from abc import ABC, abstractmethod
import numpy as np
from utils.geometry import PinGeometry

# MAGIC CONSTANTS
INITIAL_TEMPERATURE = 293.6  # [K]


class HeatConductionDriver(ABC):
    """
    Heat conduction solver on a (pins x axial layers x rings) mesh.

    The driver owns the source and temperature fields; the couplers write into them
    in place and never replace the arrays.
    """

    def __init__(
        self,
        comm,
        geometry: PinGeometry,
        initial_temperature: float = INITIAL_TEMPERATURE,
    ):
        self.comm = comm
        self.geometry = geometry
        self.source = np.zeros(geometry.shape)  # [W/m^3]
        self.temperature = np.full(geometry.shape, float(initial_temperature))  # [K]

    @property
    def pin_centers(self) -> np.ndarray:
        return self.geometry.pin_centers

    @property
    def z(self) -> np.ndarray:
        return self.geometry.z

    @property
    def r_grid_fuel(self) -> np.ndarray:
        return self.geometry.r_grid_fuel

    @property
    def r_grid_clad(self) -> np.ndarray:
        return self.geometry.r_grid_clad

    @property
    def n_pins(self) -> int:
        return self.geometry.n_pins

    @property
    def n_axial(self) -> int:
        return self.geometry.n_axial

    @property
    def n_fuel_rings(self) -> int:
        return self.geometry.n_fuel_rings

    def n_rings(self) -> int:
        return self.geometry.n_rings

    def active(self) -> bool:
        return True

    @abstractmethod
    def solve_step(self):
        pass
