"""Exceptions raised by the layout context."""

from pathlib import Path
from typing import Iterable, Optional


class UnknownTemplateError(ValueError):
    """Raised when a layout is requested for a template kind with no base configuration."""

    def __init__(self, template_kind: str, available: Iterable[str] = ()):
        self.template_kind = template_kind
        self.available = sorted(available)
        message = f"Unknown template kind '{template_kind}'"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class InvalidTemplateConfigError(ValueError):
    """
    Raised when the template base configuration file is malformed.

    Attributes:
        message: Error description
        config_path: Path of the offending YAML file
    """

    def __init__(self, message: str, config_path: Optional[Path] = None):
        self.message = message
        self.config_path = config_path
        parts = [message]
        if config_path:
            parts.append(f"Config: {config_path}")
        super().__init__("\n".join(parts))
