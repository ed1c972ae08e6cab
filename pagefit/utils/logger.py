"""
Generic loguru setup shared by all contexts.

Library modules only emit log records; sinks are installed explicitly by
entry points (scripts, services) through setup_logger(). Context-specific
wrappers live in contexts/{context}/logger.py.
"""

import sys
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from loguru import logger

import pagefit

load_dotenv()

LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[Dict[str, object]] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Configure loguru with a DEBUG file sink and a colorized console sink.

    Args:
        context_name: Context identifier used as the log file stem (e.g., "preprocess")
        log_dir: Directory for this logging session (created if missing)
        extra_provenance: Additional key-value pairs for the provenance header
        console_level: Minimum level echoed to stdout

    Returns:
        Path to the log file

    Example:
        log_file = setup_logger("preprocess", Path("outs/logs/preprocess_20251114_123456"))
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()

    for level_name, color in LEVEL_COLORS.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: Optional[Dict[str, object]] = None) -> None:
    """Log script, command line, interpreter and package version, plus any extra context."""
    logger.info("=" * 80)
    logger.info(f"Script: {sys.argv[0]}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")
    logger.info(f"pagefit: {pagefit.__version__}")

    if extra_context:
        for key, value in extra_context.items():
            logger.info(f"{key}: {value}")

    logger.info("=" * 80)
