"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from pagefit.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path, template_kind: str = None) -> Path:
    """
    Setup logger for rendering context.

    Args:
        log_dir: Directory for this rendering session
        template_kind: Template being rendered, recorded in the provenance header

    Returns:
        Path to log file

    Example:
        from pagefit.contexts.rendering.logger import setup_rendering_logger

        log_file = setup_rendering_logger(log_dir, template_kind="modern")
    """
    extra = {"Template": template_kind} if template_kind else None
    return _setup_logger(context_name="render", log_dir=log_dir, extra_provenance=extra)


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_preprocessing_fallback(template_kind: str, error: Exception) -> None:
    """Log that preprocessing failed and the raw record is rendered instead."""
    _log_error(
        f"Preprocessing failed for {template_kind} ({type(error).__name__}: {error}), "
        f"falling back to raw data"
    )


def log_template_context(template_kind: str, name: str, config) -> None:
    """
    Log the layout a template context was built with.

    Args:
        template_kind: Template the context is for
        name: Resume name
        config: LayoutConfig applied to the record
    """
    _log_info(f"Prepared {template_kind} context for '{name or '(unnamed)'}'")
    _log_debug(
        f"  compact={config.compact_mode} scale={config.scale_factor} "
        f"sidebar={config.sidebar_width}"
    )
