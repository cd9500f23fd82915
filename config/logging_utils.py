"""
Debug Logging Utilities

Console output for startup steps and service events, shown only when DEBUG is
on. The flag starts from the environment settings and is replaced by whatever
settings ``build_services`` is given.
"""

import logging
from datetime import datetime

from config.settings import Settings, settings as env_settings


_debug_logger = logging.getLogger("quotes.debug")
_debug_handler = logging.StreamHandler()
_debug_handler.setFormatter(
    logging.Formatter('[%(asctime)s] [DEBUG] %(message)s', datefmt='%H:%M:%S')
)
_debug_logger.addHandler(_debug_handler)
_debug_logger.propagate = False

_debug_enabled = False


def configure_debug_logging(settings: Settings) -> None:
    """Turn the debug helpers on or off for the given settings."""
    global _debug_enabled
    _debug_enabled = settings.DEBUG
    _debug_logger.setLevel(logging.DEBUG if settings.DEBUG else logging.WARNING)


def _tagged(message: str, prefix: str) -> str:
    return f"[{prefix}] {message}" if prefix else message


def _print_marked(marker: str, message: str, prefix: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {_tagged(f'{marker} {message}', prefix)}")


def log_debug(message: str, prefix: str = "") -> None:
    """
    Log a debug line through the debug logger.

    Args:
        message: The message to log
        prefix: Optional category tag (e.g., "AUTH", "FAVORITES")
    """
    if _debug_enabled:
        _debug_logger.debug(_tagged(message, prefix))


def log_step(step_name: str, step_number: int = None, total_steps: int = None) -> None:
    """Print a numbered startup step, e.g. ``[2/3] Creating indexes``."""
    if not _debug_enabled:
        return

    if step_number is None:
        progress = "[STEP]"
    elif total_steps is None:
        progress = f"[Step {step_number}]"
    else:
        progress = f"[{step_number}/{total_steps}]"

    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {progress} {step_name}")


def log_success(message: str, prefix: str = "") -> None:
    if _debug_enabled:
        _print_marked("✓", message, prefix)


def log_error(message: str, prefix: str = "") -> None:
    if _debug_enabled:
        _print_marked("✗", message, prefix)


configure_debug_logging(env_settings)
