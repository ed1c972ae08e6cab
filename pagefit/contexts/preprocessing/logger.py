"""
Preprocessing context logger.

Provides logging interface for the preprocessing context with automatic
[preprocess] prefix. All preprocessing modules should import from this module,
not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from pagefit.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[preprocess]"


def setup_preprocessing_logger(log_dir: Path) -> Path:
    """
    Setup logger for preprocessing context.

    Args:
        log_dir: Directory for this preprocessing session

    Returns:
        Path to log file

    Example:
        from pagefit.contexts.preprocessing.logger import setup_preprocessing_logger

        log_file = setup_preprocessing_logger(log_dir)
    """
    return _setup_logger(context_name="preprocess", log_dir=log_dir)


def _log_debug(message: str) -> None:
    """Log debug message with [preprocess] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def _log_info(message: str) -> None:
    """Log info message with [preprocess] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [preprocess] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def log_density_decision(
    total_chars: int, estimated_height: float, compact_mode: bool, global_scale: float
) -> None:
    """Log the inputs and outcome of the compact-mode and scale decision."""
    _log_debug(
        f"{total_chars} chars, ~{estimated_height:.0f}px -> "
        f"compact={compact_mode}, scale={global_scale:.3f}"
    )


def log_relocation(moved_experience: int, moved_education: int) -> None:
    """Log entries moved into achievements."""
    if moved_experience or moved_education:
        _log_info(
            f"Relocated {moved_experience} experience and {moved_education} education "
            f"entries into achievements"
        )


def log_achievements_dropped(dropped: int) -> None:
    if dropped:
        _log_debug(f"  {dropped} achievements beyond cap dropped")


def log_degenerate_content() -> None:
    """Warn that a processed resume has nothing meaningful to render."""
    _log_warning(
        "Processed resume appears to be mostly empty "
        "(no name, title, summary or experience); rendering it anyway"
    )
