# utils/geometry.py
# geometry of the fuel pins as seen by the heat conduction driver (pins x axial layers x radial rings)

from dataclasses import dataclass
from typing import Tuple
import numpy as np
import logging

logger = logging.getLogger(__name__)


@dataclass
class PinGeometry:
    pin_centers: np.ndarray  # (x, y) of each pin [m]
    z: np.ndarray  # axial boundaries [m]
    r_grid_fuel: np.ndarray  # radial boundaries of the fuel rings [m]
    r_grid_clad: np.ndarray  # radial boundaries of the cladding rings [m]

    def __post_init__(self):
        self.pin_centers = np.atleast_2d(np.asarray(self.pin_centers, dtype=float))
        self.z = np.asarray(self.z, dtype=float)
        self.r_grid_fuel = np.asarray(self.r_grid_fuel, dtype=float)
        self.r_grid_clad = np.asarray(self.r_grid_clad, dtype=float)

        if self.pin_centers.ndim != 2 or self.pin_centers.shape[1] != 2:
            raise ValueError(
                f"Pin centers must have shape (n_pins, 2), got {self.pin_centers.shape}."
            )
        if self.pin_centers.shape[0] == 0:
            raise ValueError("At least one pin is required.")
        if self.z.ndim != 1 or self.z.size < 2:
            raise ValueError("At least two axial boundaries are required.")
        if np.any(np.diff(self.z) <= 0.0):
            raise ValueError("Axial boundaries must be strictly increasing.")
        if self.r_grid_fuel.ndim != 1 or self.r_grid_fuel.size < 2:
            raise ValueError("At least one fuel ring (two radial boundaries) is required.")
        if self.r_grid_clad.ndim != 1 or self.r_grid_clad.size == 1:
            raise ValueError(
                "Cladding grid must be empty or contain at least two radial boundaries."
            )
        for name, grid in (("fuel", self.r_grid_fuel), ("cladding", self.r_grid_clad)):
            if np.any(grid < 0.0) or np.any(np.diff(grid) < 0.0):
                raise ValueError(f"Radial {name} grid must be non-negative and non-decreasing.")

        self.n_pins = self.pin_centers.shape[0]
        self.n_axial = self.z.size - 1
        self.n_fuel_rings = self.r_grid_fuel.size - 1
        self.n_clad_rings = max(self.r_grid_clad.size - 1, 0)
        self.n_rings = self.n_fuel_rings + self.n_clad_rings
        self.shape = (self.n_pins, self.n_axial, self.n_rings)
        self.n_total_rings = self.n_pins * self.n_axial * self.n_rings

    def ring_index(self, pin: int, axial: int, ring: int) -> int:
        """
        Flattened ring index of (pin, axial, ring), row-major over (pins, axial layers, rings).
        """
        try:
            return int(np.ravel_multi_index((pin, axial, ring), self.shape))
        except ValueError as e:
            raise ValueError(
                f"Ring ({pin}, {axial}, {ring}) is outside of the mesh {self.shape}."
            ) from e

    def ring_coordinates(self, index: int) -> Tuple[int, int, int]:
        """
        Inverse of ring_index: (pin, axial, ring) of a flattened ring index.
        """
        if not 0 <= index < self.n_total_rings:
            raise ValueError(
                f"Ring index {index} is outside of [0, {self.n_total_rings})."
            )
        pin, axial, ring = np.unravel_index(index, self.shape)
        return int(pin), int(axial), int(ring)

    def axial_midpoints(self) -> np.ndarray:
        return 0.5 * (self.z[:-1] + self.z[1:])

    def ring_midpoints(self) -> np.ndarray:
        """
        Radius midpoint of each radial ring, fuel rings first then cladding rings.
        """
        fuel = 0.5 * (self.r_grid_fuel[:-1] + self.r_grid_fuel[1:])
        clad = 0.5 * (self.r_grid_clad[:-1] + self.r_grid_clad[1:])
        return np.concatenate([fuel, clad])

    def ring_areas(self) -> np.ndarray:
        """
        Difference of squared radii of each radial ring. Proxy for the ring volume:
        axial height and pi are common to all rings of a layer so only relative values matter.
        """
        fuel = self.r_grid_fuel[1:] ** 2 - self.r_grid_fuel[:-1] ** 2
        clad = self.r_grid_clad[1:] ** 2 - self.r_grid_clad[:-1] ** 2
        return np.concatenate([fuel, clad])

    def is_fuel_ring(self, index: int) -> bool:
        return self.ring_coordinates(index)[2] < self.n_fuel_rings

    def fuel_mask(self) -> np.ndarray:
        """
        Boolean mask over flattened ring indices, True for fuel rings.
        """
        per_layer = np.arange(self.n_rings) < self.n_fuel_rings
        return np.tile(per_layer, self.n_pins * self.n_axial)

    @classmethod
    def from_driver(cls, heat_driver) -> "PinGeometry":
        """
        Build the geometry from the accessors of a heat conduction driver.
        """
        geometry = cls(
            pin_centers=heat_driver.pin_centers,
            z=heat_driver.z,
            r_grid_fuel=heat_driver.r_grid_fuel,
            r_grid_clad=heat_driver.r_grid_clad,
        )
        if geometry.n_fuel_rings != heat_driver.n_fuel_rings:
            raise ValueError(
                f"Heat driver reports {heat_driver.n_fuel_rings} fuel rings but its grid has {geometry.n_fuel_rings}."
            )
        logger.debug(
            f"Pin geometry: {geometry.n_pins} pins, {geometry.n_axial} axial layers, {geometry.n_rings} rings per layer."
        )
        return geometry
