"""
Logging configuration and utilities for the HTS trade system.
"""
from .config import configure_logging, get_dispatch_logger, get_logger, log_dispatch_attempt

__all__ = ["configure_logging", "get_logger", "get_dispatch_logger", "log_dispatch_attempt"]
