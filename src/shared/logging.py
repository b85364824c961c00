import logging
import sys
from typing import Dict, Optional, TextIO

from src.const import DEFAULT_LOG_LEVEL, LIBRARY_LOG_LEVELS, LOG_DATE_FORMAT, LOG_FORMAT, PROGRESS_LOGGER


class LoggingManager:
    """Manager for logging setup and logger retrieval."""

    @classmethod
    def setup_logging(cls, level: str = DEFAULT_LOG_LEVEL, stream: Optional[TextIO] = None,
                      progress: bool = False,
                      library_log_levels: Optional[Dict[str, str]] = None) -> None:
        """Setup logging for the command line tool.

        Reports are written to stdout, so log records always go to stderr.

        Args:
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            stream: Destination stream, stderr when omitted
            progress: Whether progress messages should be emitted
            library_log_levels: Per-library level overrides
        """
        # Convert string level to logging level
        numeric_level = getattr(logging, level.upper(), logging.WARNING)

        # Create formatter
        formatter = logging.Formatter(
            fmt=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT
        )

        # Setup console handler
        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setFormatter(formatter)

        # Configure root logger
        root_logger = logging.getLogger()
        root_logger.setLevel(numeric_level)
        root_logger.addHandler(console_handler)

        # Progress lines are independent of the global level
        progress_logger = logging.getLogger(PROGRESS_LOGGER)
        progress_logger.setLevel(logging.INFO if progress else logging.WARNING)

        # Set levels for noisy libraries
        levels = LIBRARY_LOG_LEVELS if library_log_levels is None else library_log_levels
        for logger_name, library_level in levels.items():
            logging.getLogger(logger_name).setLevel(getattr(logging, library_level.upper(), logging.WARNING))
