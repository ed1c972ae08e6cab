"""
Intake Context

Responsibilities:
- Tracks per-model rate limits and selects a model for each request
- Structures free-text career details into a ResumeRecord via an LLM provider

Owns: Model catalog, usage counters, structuring prompts
Never: Decides layout or truncates content
"""

from pagefit.contexts.intake.exceptions import InvalidModelResponseError, ModelQuotaExhaustedError
from pagefit.contexts.intake.model_selector import (
    DEFAULT_MODELS,
    ModelSelector,
    ModelSpec,
    UseCase,
    load_model_catalog,
)
from pagefit.contexts.intake.structuring import build_structuring_prompt, structure_resume

__all__ = [
    # Model selection
    "ModelSelector",
    "ModelSpec",
    "UseCase",
    "DEFAULT_MODELS",
    "load_model_catalog",
    # Structuring
    "structure_resume",
    "build_structuring_prompt",
    # Errors
    "ModelQuotaExhaustedError",
    "InvalidModelResponseError",
]
