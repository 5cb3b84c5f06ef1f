"""Utility modules."""

from .io_handler import IOHandler, to_jsonable
from .logger import set_log_level, setup_logger

__all__ = ["IOHandler", "set_log_level", "setup_logger", "to_jsonable"]
