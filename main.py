# main.py
import os
import logging
import argparse
from parsers.input_parser import InputDeck
from utils.comm import SerialGroup
from utils.initializer import initialize_coupling


def setup_logging(level=logging.INFO):
    """Configure logging to file and console."""
    log_dir = "logs"
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "coupling.log")

    # Define logging format
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Configure the root logger
    logging.basicConfig(
        level=level,
        format=log_format,
        handlers=[
            logging.FileHandler(log_file, mode="w"),  # Overwrite log file each run
            logging.StreamHandler(),  # Also output to console
        ],
    )


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Run the coupled transport / heat conduction simulation.")
    parser.add_argument(
        "input_deck_path",
        type=str,
        help="Path to the input deck YAML file.",
    )
    parser.add_argument(
        "--mpi",
        action="store_true",
        help="Synchronize over MPI.COMM_WORLD (requires mpi4py).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
    )
    return parser.parse_args()


def main():
    args = parse_args()
    setup_logging(getattr(logging, args.log_level))
    logger = logging.getLogger(__name__)

    # Parse the input deck
    input_deck = InputDeck.from_yaml(args.input_deck_path)

    if args.mpi:
        from mpi4py import MPI

        comm = MPI.COMM_WORLD
    else:
        comm = SerialGroup()

    coupler = initialize_coupling(input_deck, comm)
    history = coupler.solve()

    last = history[-1]
    logger.info(
        f"Coupling finished after {len(history)} iterations, last temperature residual: {last.residual}"
    )


if __name__ == "__main__":
    main()
