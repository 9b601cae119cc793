# couplers/transfer.py
# transfer of the heat source (transport regions -> rings) and of the temperature (rings -> transport regions)

import numpy as np
from scipy.sparse import diags
import logging
from utils.geometry import PinGeometry
from couplers.mapping import RingRegionMapping

logger = logging.getLogger(__name__)


class DegenerateVolumeError(ValueError):
    """Raised when a transport region has no ring volume to average temperatures over."""


class FieldTransfer:
    """
    Both transfers are single sparse products built once from the ring <-> region mapping:

    - heat source: each fuel ring gets the plain mean over its regions, other rings get zero;
    - temperature: each region gets the mean over its rings weighted by r_out^2 - r_in^2.
    """

    def __init__(self, geometry: PinGeometry, mapping: RingRegionMapping):
        if mapping.n_rings != geometry.n_total_rings:
            raise ValueError(
                f"Mapping covers {mapping.n_rings} rings but the mesh has {geometry.n_total_rings}."
            )
        self.geometry = geometry
        self.mapping = mapping

        incidence = mapping.incidence()

        # heat source operator: row-normalized incidence, fuel rows only
        fuel = geometry.fuel_mask().astype(float)
        n_regions_per_ring = np.asarray(incidence.sum(axis=1)).ravel()
        self.source_operator = (
            diags(fuel / n_regions_per_ring) @ incidence
        ).tocsr()

        # temperature operator: incidence transposed and weighted by ring volume
        ring_weights = np.tile(geometry.ring_areas(), geometry.n_pins * geometry.n_axial)
        self.temperature_operator = (incidence.T @ diags(ring_weights)).tocsr()
        self.region_weights = np.asarray(self.temperature_operator.sum(axis=1)).ravel()

    def push_heat_source(self, heat_driver, transport_driver, power: float):
        """
        Overwrite the source field of the heat driver with the ring-averaged heat source
        of the transport driver normalized to `power`.
        """
        q = np.asarray(transport_driver.heat_source(power), dtype=float).ravel()
        if q.size != self.mapping.n_regions:
            raise ValueError(
                f"Transport heat source has {q.size} values, expected one per region ({self.mapping.n_regions})."
            )

        source = heat_driver.source
        source.fill(0.0)
        source[...] = (self.source_operator @ q).reshape(source.shape)
        logger.debug(f"Heat source pushed, max={source.max()} W/m^3")

    def pull_temperature(self, heat_driver, transport_driver) -> np.ndarray:
        """
        Set the volume-averaged ring temperature on every transport region.
        Returns the region temperatures in array-index order.
        """
        degenerate = np.flatnonzero(self.region_weights <= 0.0)
        if degenerate.size > 0:
            raise DegenerateVolumeError(
                f"Transport regions {degenerate.tolist()} only overlap rings of zero volume."
            )

        temperature = np.ravel(heat_driver.temperature)
        region_temperature = (self.temperature_operator @ temperature) / self.region_weights
        for region, value in zip(self.mapping.regions, region_temperature):
            transport_driver.set_region_temperature(region, float(value))
        logger.debug(
            f"Temperature pulled, min={region_temperature.min()} K, max={region_temperature.max()} K"
        )
        return region_temperature
