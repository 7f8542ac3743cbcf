"""Board presets and logging setup for scripts using the engine."""

import logging
from typing import Dict, Tuple, Union

# Standard difficulty levels: name -> (width, height, mines_count)
LEVELS: Dict[str, Tuple[int, int, int]] = {
    "beginner": (8, 8, 10),
    "intermediate": (16, 16, 40),
    "expert": (30, 16, 99),
}

DEFAULT_LEVEL = "intermediate"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_level(name: str) -> Tuple[int, int, int]:
    """
    Look up a difficulty preset.

    Raises:
        KeyError: If the level name is unknown.
    """
    try:
        return LEVELS[name]
    except KeyError:
        raise KeyError(
            f"Unknown level {name!r}; expected one of {sorted(LEVELS)}."
        ) from None


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Install a basic stderr handler for the package's loggers."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
