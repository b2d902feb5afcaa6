"""Logging configuration for the agent orchestrator.

Everything logs under the ``agent_orchestrator`` package logger. The level
comes from the CLI flag, then the AGENT_LOG_LEVEL env var, then WARNING.
Records go to stderr and, when a log directory is configured, also to
``combined.log`` and ``error.log`` files inside it.
"""

import logging
import os
import sys
from pathlib import Path

PACKAGE_LOGGER = "agent_orchestrator"

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: str | None) -> int:
    resolved = (level or os.environ.get("AGENT_LOG_LEVEL") or "WARNING").upper()
    numeric = getattr(logging, resolved, None)
    if not isinstance(numeric, int):
        print(f"Warning: Invalid log level '{resolved}', using WARNING", file=sys.stderr)
        return logging.WARNING
    return numeric


def setup_logging(level: str | None = None, log_dir: str | None = None) -> logging.Logger:
    """Configure the package logger.

    Safe to call more than once: handlers are only attached the first time,
    later calls just update levels.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
        log_dir: Optional directory for combined.log / error.log files.

    Returns:
        The configured agent_orchestrator logger.
    """
    numeric_level = _resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)

    if logger.handlers:
        for handler in logger.handlers:
            # error.log keeps its own threshold
            if getattr(handler, "_errors_only", False):
                continue
            handler.setLevel(numeric_level)
        return logger

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)

        combined = logging.FileHandler(path / "combined.log", encoding="utf-8")
        combined.setLevel(numeric_level)
        combined.setFormatter(formatter)
        logger.addHandler(combined)

        errors = logging.FileHandler(path / "error.log", encoding="utf-8")
        errors.setLevel(logging.ERROR)
        errors.setFormatter(formatter)
        errors._errors_only = True  # type: ignore[attr-defined]
        logger.addHandler(errors)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module (typically ``__name__``)."""
    return logging.getLogger(name)
