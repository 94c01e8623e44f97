from __future__ import annotations

"""Logging helpers for kineticrir."""

from dataclasses import dataclass
import logging
from typing import Optional

_ROOT = "kineticrir"


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for kineticrir logging.

    Example:
        >>> config = LoggingConfig(level="DEBUG")
        >>> logger = setup_logging(config)
    """

    level: str | int = "INFO"
    format: str = "%(levelname)s:%(name)s:%(message)s"
    datefmt: Optional[str] = None
    propagate: bool = False

    def resolve_level(self) -> int:
        """Resolve level to a logging integer constant."""
        if isinstance(self.level, int):
            return self.level
        if not isinstance(self.level, str):
            raise TypeError("level must be str or int")
        level = logging.getLevelName(self.level.upper())
        if not isinstance(level, int):
            raise ValueError(f"unknown log level: {self.level}")
        return level


def setup_logging(config: LoggingConfig, *, name: str = _ROOT) -> logging.Logger:
    """Configure and return the base kineticrir logger.

    Calling it twice keeps a single handler; only the level is refreshed.
    """
    logger = logging.getLogger(name)
    level = config.resolve_level()
    logger.setLevel(level)
    logger.propagate = config.propagate
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(config.format, datefmt=config.datefmt))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger namespaced under the kineticrir root.

    Example:
        >>> logger = get_logger("sim.raytrace")
        >>> logger.name
        'kineticrir.sim.raytrace'
    """
    if not name:
        return logging.getLogger(_ROOT)
    if name == _ROOT or name.startswith(_ROOT + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT}.{name}")
