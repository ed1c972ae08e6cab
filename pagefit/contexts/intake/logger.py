"""
Intake context logger.

Provides logging interface for the intake context with automatic [intake]
prefix. All intake modules should import from this module, not from
utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from pagefit.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[intake]"


def setup_intake_logger(log_dir: Path) -> Path:
    """Configure loguru for an intake session; returns the log file path."""
    return _setup_logger(context_name="intake", log_dir=log_dir)


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def log_model_selected(model: str, use_case: str, estimated_tokens: int) -> None:
    _log_debug(f"Selected {model} for {use_case} (~{estimated_tokens} tokens)")


def log_model_fallback(failed_model: str, error: Exception, next_model) -> None:
    """Log a failed model call and the model tried next (None if none left)."""
    target = next_model if next_model else "no remaining model"
    _log_warning(f"{failed_model} failed ({type(error).__name__}: {error}), falling back to {target}")


def log_structuring_result(model: str, total_tokens: int, name: str) -> None:
    _log_info(f"Structured resume for '{name}' with {model} ({total_tokens} tokens)")
