"""
Logging setup for the account service.
"""
from typing import Optional
import logging
import os
import sys

from ..config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_FILE_NAME = "account_service.log"


def build_handlers(log_dir: Optional[str]) -> list:
    handlers = [logging.StreamHandler(sys.stdout)]

    if not log_dir:
        return handlers

    # Continue with stdout only if the log directory cannot be used
    try:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(log_dir, LOG_FILE_NAME)))
    except OSError as e:
        print(f"WARNING: Could not set up file logging: {e}", file=sys.stderr)

    return handlers


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=build_handlers(settings.LOG_DIR),
    )
