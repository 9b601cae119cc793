# couplers/mapping.py
# correspondence between the rings of the heat conduction mesh and the regions of the transport geometry

from dataclasses import dataclass, field
from typing import Dict, Hashable, List
import numpy as np
from scipy.sparse import csr_matrix
import logging
from utils.geometry import PinGeometry

logger = logging.getLogger(__name__)

# MAGIC CONSTANTS
N_AZIMUTHAL = 4  # azimuthal samples per ring
ANGLE_OFFSET = 0.01  # [rad] keeps the samples off the boundaries of symmetric geometries


class MappingError(ValueError):
    """Raised when the rings cannot be mapped completely onto transport regions."""


@dataclass
class RingRegionMapping:
    """
    Ring <-> region tables. Regions are stored by their array index, i.e. their
    position in `regions`, which is the order in which they were discovered.
    """

    regions: List[Hashable] = field(default_factory=list)
    ring_to_regions: Dict[int, List[int]] = field(default_factory=dict)
    region_to_rings: Dict[int, List[int]] = field(default_factory=dict)

    @property
    def n_rings(self) -> int:
        return len(self.ring_to_regions)

    @property
    def n_regions(self) -> int:
        return len(self.regions)

    def incidence(self) -> csr_matrix:
        """
        Sparse (n_rings, n_regions) matrix with a one for every associated (ring, region) pair.
        """
        rows = []
        cols = []
        for ring, region_indices in self.ring_to_regions.items():
            rows.extend([ring] * len(region_indices))
            cols.extend(region_indices)
        data = np.ones(len(rows))
        return csr_matrix((data, (rows, cols)), shape=(self.n_rings, self.n_regions))

    def check_inverse(self):
        """
        Raise a MappingError unless both tables describe the same set of (ring, region) pairs.
        """
        forward = {
            (ring, region)
            for ring, region_indices in self.ring_to_regions.items()
            for region in region_indices
        }
        backward = {
            (ring, region)
            for region, rings in self.region_to_rings.items()
            for ring in rings
        }
        if forward != backward:
            raise MappingError(
                f"Ring and region tables disagree on {len(forward ^ backward)} pairs."
            )


def build_mapping(
    geometry: PinGeometry,
    transport,
    n_azimuthal: int = N_AZIMUTHAL,
    angle_offset: float = ANGLE_OFFSET,
) -> RingRegionMapping:
    """
    Sample every ring of the conduction mesh at n_azimuthal angles and record the
    transport region containing each sample.

    Rings are visited pin by pin, then axial layer, then radial ring (fuel rings first),
    which is the row-major flattening of geometry.ring_index. A region seen for the first
    time gets the next array index; regions are compared with ==, never by identity.
    """
    if n_azimuthal < 1:
        raise MappingError(f"At least one azimuthal sample is required, got {n_azimuthal}.")

    mapping = RingRegionMapping()
    tracked: Dict[Hashable, int] = {}

    z_mid = geometry.axial_midpoints()
    r_mid = geometry.ring_midpoints()
    theta = 2.0 * np.pi * np.arange(n_azimuthal) / n_azimuthal + angle_offset

    ring_index = 0
    for i in range(geometry.n_pins):
        x_center, y_center = geometry.pin_centers[i]
        for j in range(geometry.n_axial):
            for k in range(geometry.n_rings):
                region_indices = []
                for x, y in zip(
                    x_center + r_mid[k] * np.cos(theta),
                    y_center + r_mid[k] * np.sin(theta),
                ):
                    point = (float(x), float(y), float(z_mid[j]))
                    region = transport.region_for_point(point)
                    if region is None:
                        raise MappingError(
                            f"Point {point} of ring ({i}, {j}, {k}) is not inside any transport region."
                        )
                    if region not in tracked:
                        tracked[region] = len(mapping.regions)
                        mapping.regions.append(region)
                        mapping.region_to_rings[tracked[region]] = []
                    array_index = tracked[region]
                    if array_index not in region_indices:
                        region_indices.append(array_index)
                        mapping.region_to_rings[array_index].append(ring_index)

                mapping.ring_to_regions[ring_index] = region_indices
                ring_index += 1

    logger.info(
        f"Mapped {mapping.n_rings} rings onto {mapping.n_regions} transport regions."
    )
    return mapping
