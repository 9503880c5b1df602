"""
RVS Onboarding Logging Configuration

Configurable logging with debug mode support.
"""

import os
import logging
import re
import sys
from pathlib import Path
from typing import Optional


# Check for debug mode
DEBUG_MODE = os.environ.get("RVS_ONBOARDING_DEBUG", "").lower() in ("1", "true", "yes")

# Keys whose values never reach log output
SECRET_PATTERNS = [
    "password_hash", "password", "apikey", "api_key", "secret", "token",
]


def mask_secrets(text: str, mask: str = "********") -> str:
    """Mask secret values in key=value / key: value fragments and bearer headers."""
    if not text:
        return text

    result = text
    for pattern in SECRET_PATTERNS:
        regex = rf'({pattern}["\']?\s*[=:]\s*["\']?)([^"\'\s,}}]+)(["\']?)'
        result = re.sub(regex, rf'\1{mask}\3', result, flags=re.IGNORECASE)

    result = re.sub(r'(Bearer\s+)[A-Za-z0-9._\-]+', rf'\1{mask}', result)
    return result


class SecretMaskingFormatter(logging.Formatter):
    """Formatter that masks secrets in log messages."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return mask_secrets(message)


def setup_logging(
    level: Optional[int] = None,
    log_file: Optional[Path] = None,
    quiet: bool = False
) -> logging.Logger:
    """Set up logging configuration.

    Args:
        level: Logging level (default: DEBUG if RVS_ONBOARDING_DEBUG, else WARNING)
        log_file: Optional path to log file
        quiet: If True, suppress console output

    Returns:
        Configured logger
    """
    if level is None:
        level = logging.DEBUG if DEBUG_MODE else logging.WARNING

    logger = logging.getLogger("rvs_onboarding")
    logger.setLevel(min(level, logging.DEBUG) if log_file else level)

    # Clear existing handlers
    logger.handlers.clear()

    if not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)

        if DEBUG_MODE:
            console_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        else:
            console_format = "%(levelname)s: %(message)s"

        console_handler.setFormatter(SecretMaskingFormatter(console_format))
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_format = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
        file_handler.setFormatter(SecretMaskingFormatter(file_format))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "rvs_onboarding") -> logging.Logger:
    """Get a logger under the package namespace.

    Args:
        name: Logger name (will be prefixed with 'rvs_onboarding.')

    Returns:
        Logger instance
    """
    if not name.startswith("rvs_onboarding"):
        name = f"rvs_onboarding.{name}"
    return logging.getLogger(name)

