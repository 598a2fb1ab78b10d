"""Unified logging configuration for the component engine."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

# Log directory; file logging is enabled only when LOG_DIR is set
LOG_DIR: Optional[Path] = Path(os.environ["LOG_DIR"]) if os.getenv("LOG_DIR") else None

# Prevent duplicate handlers
_configured_loggers: set[str] = set()


def setup_logger(name: str, filename: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """Setup a logger with console and (optionally) file handlers.

    Args:
        name: Logger name (e.g., 'component_engine')
        filename: Log file name inside LOG_DIR (e.g., 'engine.log')
        level: Minimum level for both handlers

    Returns:
        Configured logger instance
    """
    if name in _configured_loggers:
        return logging.getLogger(name)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False  # Prevent duplicate logs

    # File handler
    if filename and LOG_DIR is not None:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(LOG_DIR / filename, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(
            "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"
        ))
        logger.addHandler(fh)

    # Console handler
    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] %(message)s"
    ))
    logger.addHandler(sh)

    _configured_loggers.add(name)
    return logger


def get_engine_logger() -> logging.Logger:
    """Root logger for the engine package (all module loggers are children)."""
    return setup_logger("component_engine", "engine.log")
