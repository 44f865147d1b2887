"""TowerSim - airport control tower simulation.

Loads a saved airport, advances it by a number of ticks, prints a summary of
the control tower and writes the new state back out.

Typical usage:
    python -m towersim.main --save-dir saves/default
    python -m towersim.main --save-dir saves/default --ticks 10 --output-dir saves/after
    python -m towersim.main --config config/towersim.yaml
"""

import argparse
import sys

from towersim.core.config import ConfigError, SimulationConfig
from towersim.core.logging_system import LoggingError, get_logger, initialize_logging
from towersim.persistence.codec import MalformedSaveError
from towersim.persistence.save_state import SaveState


def _non_negative_int(value: str) -> int:
    ticks = int(value)
    if ticks < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return ticks


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments to parse; ``sys.argv[1:]`` if None

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="TowerSim - Airport Control Tower Simulation")

    parser.add_argument(
        "--save-dir",
        type=str,
        help="Directory holding the save state to load (default: from config)",
    )

    parser.add_argument(
        "--ticks",
        type=_non_negative_int,
        help="Number of ticks to simulate (default: simulation.ticks_per_run)",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Simulation configuration YAML file",
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        help="Directory to write the resulting save state to (default: the save directory)",
    )

    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> None:
    """Load, simulate and save according to parsed arguments.

    Raises:
        ConfigError: If the configuration file is invalid
        LoggingError: If the logging configuration cannot be loaded
        MalformedSaveError: If the save state is missing or malformed
    """
    config = SimulationConfig.from_file(args.config) if args.config else SimulationConfig.default()

    initialize_logging(config.logging_config, use_platform_dir=True)
    logger = get_logger("towersim.main")

    save_dir = args.save_dir or config.save_directory
    ticks = args.ticks if args.ticks is not None else config.ticks_per_run

    save_state = SaveState(config)
    tower = save_state.load(save_dir)
    logger.info("Running %d ticks from tick %d", ticks, tower.ticks_elapsed)

    for _ in range(ticks):
        tower.tick()

    print(tower)
    save_state.save(tower, args.output_dir or save_dir)


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for a bad save state or configuration).
    """
    args = parse_args(argv)
    try:
        run(args)
    except (ConfigError, LoggingError, MalformedSaveError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
