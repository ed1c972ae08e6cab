"""
Layout context logger.

Provides logging interface for the layout context with automatic [layout] prefix.
All layout modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from pagefit.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[layout]"


def setup_layout_logger(log_dir: Path) -> Path:
    """Configure loguru for a layout session; returns the log file path."""
    return _setup_logger(context_name="layout", log_dir=log_dir)


def _log_debug(message: str) -> None:
    """Log debug message with [layout] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def _log_info(message: str) -> None:
    """Log info message with [layout] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def log_layout_decision(template_kind: str, metrics, config) -> None:
    """
    Log the density classification and the resulting layout knobs.

    Args:
        template_kind: Template the layout was optimized for
        metrics: ContentMetrics from analyze_content()
        config: LayoutConfig from optimize_layout()
    """
    _log_debug(
        f"{template_kind}: density={metrics.content_density} "
        f"({metrics.estimated_height}px, {metrics.page_fill_ratio:.0%} of page)"
    )
    _log_debug(
        f"  fonts name={config.name_font_size} body={config.body_font_size} "
        f"compact={config.compact_mode} scale={config.scale_factor}"
    )
    _log_debug(
        f"  caps exp={config.max_experience_items} bullets={config.max_bullets_per_exp} "
        f"achievements={config.max_achievements}"
    )
