"""Exceptions raised by the intake context."""

from typing import Iterable, Optional


class ModelQuotaExhaustedError(RuntimeError):
    """
    Raised when no model in the catalog has rate-limit headroom for a request.

    Attributes:
        use_case: Use case the model was requested for
        tried: Models that were attempted (and failed) before giving up
    """

    def __init__(self, use_case: str, tried: Iterable[str] = ()):
        self.use_case = use_case
        self.tried = list(tried)

        message = f"No model available for '{use_case}'"
        if self.tried:
            message += f" (tried: {', '.join(self.tried)})"
        super().__init__(message)


class InvalidModelResponseError(ValueError):
    """
    Raised when the structuring model returns a payload that is not a usable resume.

    Attributes:
        message: What was wrong with the payload
        model: Model that produced it
    """

    def __init__(self, message: str, model: Optional[str] = None):
        self.message = message
        self.model = model
        super().__init__(f"{model}: {message}" if model else message)
