# couplers/PicardCoupler.py

from typing import Callable, List, Optional
import numpy as np
import logging
from utils.geometry import PinGeometry
from utils.states import IterationRecord
from physics.transport import TransportDriver
from physics.conduction import HeatConductionDriver
from couplers.mapping import build_mapping, N_AZIMUTHAL, ANGLE_OFFSET
from couplers.transfer import FieldTransfer

logger = logging.getLogger(__name__)


class PicardCoupler:
    def __init__(
        self,
        transport: TransportDriver,
        heat: HeatConductionDriver,
        comm,
        power: float,
        max_timesteps: int,
        max_picard_iter: int,
        n_azimuthal: int = N_AZIMUTHAL,
        angle_offset: float = ANGLE_OFFSET,
        on_iteration: Optional[Callable[[IterationRecord], None]] = None,
    ):
        if power <= 0.0:
            raise ValueError(f"Invalid power: {power}. Power must be positive.")
        if max_timesteps < 1 or max_picard_iter < 1:
            raise ValueError(
                f"Invalid iteration counts: max_timesteps={max_timesteps}, max_picard_iter={max_picard_iter}. Both must be at least 1."
            )
        self.transport = transport
        self.heat = heat
        self.comm = comm
        self.power = power
        self.max_timesteps = max_timesteps
        self.max_picard_iter = max_picard_iter
        self.on_iteration = on_iteration

        # the mapping is built on every process so that all of them agree on the region order
        self.geometry = PinGeometry.from_driver(heat)
        self.mapping = build_mapping(
            self.geometry, transport, n_azimuthal=n_azimuthal, angle_offset=angle_offset
        )
        self.transfer = FieldTransfer(self.geometry, self.mapping)
        self.transport.attach_regions(self.mapping.regions)

        if self.transport.active():
            materials = [self.transport.material_index(r) for r in self.mapping.regions]
            self.transport.create_tallies(materials)

    def solve(self) -> List[IterationRecord]:
        """
        Run max_timesteps x max_picard_iter coupled iterations.

        The Picard loop runs a fixed number of iterations, no convergence test is made;
        the temperature residual of each iteration is reported through the returned
        records and the on_iteration callback.
        """
        history = []
        old_temperature = None
        for i_timestep in range(self.max_timesteps):
            for i_picard in range(self.max_picard_iter):
                # this index repeats across time steps when max_picard_iter > max_timesteps
                step_index = i_timestep * self.max_timesteps + i_picard

                # Neutron transport
                if self.transport.active():
                    self.transport.begin_step()
                    self.transport.solve_step(step_index)
                    self.transport.end_step()
                    logger.debug(f"[Step {step_index}] Transport solved.")
                self.comm.barrier()

                self.transfer.push_heat_source(self.heat, self.transport, self.power)

                # Heat conduction
                if self.heat.active():
                    self.heat.solve_step()
                    logger.debug(f"[Step {step_index}] Heat conduction solved.")
                self.comm.barrier()

                new_temperature = self.transfer.pull_temperature(self.heat, self.transport)

                record = IterationRecord(
                    timestep=i_timestep,
                    picard_iteration=i_picard,
                    step_index=step_index,
                    residual=self._residual(old_temperature, new_temperature),
                )
                logger.info(
                    f"[Time step {i_timestep}, iteration {i_picard}] Residuals: temperature={record.residual}"
                )
                history.append(record)
                if self.on_iteration is not None:
                    self.on_iteration(record)
                old_temperature = new_temperature

            logger.info(f"Time step {i_timestep} completed.")
        return history

    @staticmethod
    def _residual(old: Optional[np.ndarray], new: np.ndarray) -> Optional[float]:
        """
        Max relative change between two sets of region temperatures.
        """
        if old is None:
            return None
        change = np.abs(new - old)
        scale = np.abs(new)
        relative = np.divide(change, scale, out=np.zeros_like(change), where=scale > 0.0)
        return float(np.max(relative))
