"""
Logging setup for applications embedding the audit behaviors.
"""

import logging
from typing import Optional

from logable.core.config import settings


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Configure root logging from settings unless explicit values are given."""
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=fmt or settings.log_format,
    )
    logging.getLogger(__name__).debug(f"Logging configured for {settings.app_name} at {level_name}")
