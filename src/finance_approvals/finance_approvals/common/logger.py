"""
Logging Configuration
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logger(level: str = "INFO", log_file: Optional[str] = None, audit_file: Optional[str] = None):
    """
    Setup engine logger with console and optional file output

    Args:
        level: Minimum level for the console and file sinks
        log_file: Rotating file for all records (skipped when empty)
        audit_file: Rotating file for approval decisions only (skipped when empty)

    Returns:
        logger: Configured logger instance
    """
    # Remove default logger
    logger.remove()

    # Console logging
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level,
        colorize=True,
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=level,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
        )

    if audit_file:
        Path(audit_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            audit_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {message}",
            filter=lambda record: "AUDIT" in record["extra"],
            rotation="10 MB",
            retention="365 days",
            compression="zip",
        )

    return logger


def log_audit(actor: str, action: str, details: str):
    """
    Log audit trail entry

    Args:
        actor: Who performed the action (employee id or system approver)
        action: Action performed
        details: Action details
    """
    logger.bind(AUDIT=True).info(f"ACTOR={actor} | ACTION={action} | DETAILS={details}")
