"""
Logging utilities for the Discord Channel Architect Bot.
"""

import logging
from datetime import datetime
from typing import List, Optional


_logger: Optional[logging.Logger] = None


def get_logger() -> logging.Logger:
    """Get the application logger, initializing if needed."""
    global _logger
    if _logger is None:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s | %(levelname)-8s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        _logger = logging.getLogger("channel_bot")
    return _logger


logger = get_logger()


class CommandLogCollector:
    """Collects log messages for a single command invocation."""

    def __init__(self, invocation_id: str) -> None:
        self.invocation_id = invocation_id
        self.logs: List[str] = []
        self.start_time = datetime.now()

    def log(self, level: str, message: str) -> None:
        """Add a log entry and mirror it to the main logger."""
        timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        self.logs.append(f"{timestamp} | {level:<8} | [{self.invocation_id}] {message}")
        getattr(logger, level.lower(), logger.info)(f"[{self.invocation_id}] {message}")

    def info(self, message: str) -> None:
        self.log("INFO", message)

    def warning(self, message: str) -> None:
        self.log("WARNING", message)

    def error(self, message: str) -> None:
        self.log("ERROR", message)

    def elapsed_seconds(self) -> float:
        """Seconds since the invocation started."""
        return (datetime.now() - self.start_time).total_seconds()
