"""Logging configuration for the structure mapper."""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_level(level: str) -> int:
    """Numeric level for a level name; raises ValueError for unknown names."""
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


class StructureMapperLogger:
    """Logger wrapper shared by the parser, builder, miner and scanner."""

    def __init__(self, name: str = "structure_mapper", level: str = "INFO"):
        """
        Initialize logger.

        Args:
            name: Logger name
            level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(resolve_level(level))

        if not self.logger.handlers:
            self._setup_handlers()

    def _setup_handlers(self):
        # stderr keeps stdout free for command output
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        self.logger.addHandler(handler)

    def debug(self, message: str, **kwargs):
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        self.logger.error(message, **kwargs)

    @contextmanager
    def timed(self, operation: str, metrics: Optional[Dict[str, float]] = None) -> Iterator[None]:
        """
        Time a block, log it at DEBUG and record it in ``metrics``.

        The elapsed time is recorded even when the block raises.
        """
        start_time = time.time()
        try:
            yield
        finally:
            elapsed = time.time() - start_time
            if metrics is not None:
                metrics[operation] = elapsed
            self.logger.debug(f"{operation} took {elapsed:.3f}s")


_logger = StructureMapperLogger()


def get_logger() -> StructureMapperLogger:
    """Get the global logger instance."""
    return _logger


def set_log_level(level: str):
    """Set the global log level."""
    _logger.logger.setLevel(resolve_level(level))
