# utils/initializer.py

import importlib
import logging
from couplers.PicardCoupler import PicardCoupler

logger = logging.getLogger(__name__)


def load_driver(path):
    """
    Import the driver class given as 'package.module:ClassName'.
    """
    module_name, _, class_name = path.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import driver module '{module_name}': {e}") from e
    try:
        return getattr(module, class_name)
    except AttributeError as e:
        raise ValueError(f"Module '{module_name}' has no driver '{class_name}'") from e


def initialize_coupling(input_deck, comm, on_iteration=None):
    coupling = input_deck.coupling
    logger.info(f"Total power: {coupling.power} W")
    logger.info(f"Time steps: {coupling.max_timesteps}")
    logger.info(f"Picard iterations per time step: {coupling.max_picard_iter}")

    transport_cls = load_driver(input_deck.transport.driver)
    heat_cls = load_driver(input_deck.heat.driver)
    logger.info(f"Transport driver: {transport_cls.__name__}")
    logger.info(f"Heat driver: {heat_cls.__name__}")

    transport = transport_cls(comm, **input_deck.transport.options)
    heat = heat_cls(comm, **input_deck.heat.options)

    return PicardCoupler(
        transport=transport,
        heat=heat,
        comm=comm,
        power=coupling.power,
        max_timesteps=coupling.max_timesteps,
        max_picard_iter=coupling.max_picard_iter,
        n_azimuthal=coupling.n_azimuthal,
        angle_offset=coupling.angle_offset,
        on_iteration=on_iteration,
    )
