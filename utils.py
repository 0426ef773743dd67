# utils.py
"""
Utility functions for the particle wind application.

This module provides helpers that are used by the entry point but do not
belong to the physics or the rendering: logging setup, configuration
loading and frame-time limiting.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, Optional

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: The full configuration. Its optional "logging" section may
#       hold "level", "format" and "log_file".
#   - Side Effects: Replaces the root logger's handlers with a console
#     handler and a rotating file handler. Creates the log directory.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: The parsed JSON document.
#   - Side Effects: Logs and re-raises FileNotFoundError and
#     json.JSONDecodeError.
#
# limit_delta_time(dt: float, max_dt: Optional[float]) -> float:
#   - Outputs: dt capped at max_dt (no cap when max_dt is None).

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/particles.log'


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the root logger for console and rotating file output.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', DEFAULT_LOG_FORMAT)
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Avoid duplicate output when called more than once.
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # 1MB per file, 5 backups.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}, writing to {log_file_path}.")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"Error decoding JSON from {path}: {e}")
        raise
    logging.info("Configuration loaded successfully.")
    return config


def limit_delta_time(dt: float, max_dt: Optional[float]) -> float:
    """Caps a measured frame time so a stall does not teleport particles."""
    if max_dt is None:
        return dt
    return min(dt, max_dt)
