"""
Rate-limit aware model selection for the structuring service.

Tracks per-model request and token usage against each model's published
limits (requests per minute, tokens per minute, requests per day) and picks
the strongest model that still has headroom. Counters reset when the injected
clock rolls over to a new minute or day.

A ModelSelector is an ordinary object: create one per process (or per test)
and pass it to structure_resume(). All counter access is serialized with a
lock, so one instance can be shared across request threads.
"""

import os
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from dotenv import load_dotenv
from omegaconf import OmegaConf

from pagefit.contexts.intake.logger import log_model_selected

load_dotenv()
MODEL_CATALOG_PATH = os.getenv("MODEL_CATALOG_PATH")

SECONDS_PER_MINUTE = 60
SECONDS_PER_DAY = 24 * 60 * 60
DEFAULT_ESTIMATED_TOKENS = 1000

# Models considered strong enough for complex analysis
HIGH_PERFORMANCE_COUNT = 3


@dataclass(frozen=True)
class ModelSpec:
    """
    Published rate limits of one model.

    Attributes:
        name: Model identifier passed to the provider
        rpm: Requests per minute
        tpm: Tokens per minute
        rpd: Requests per day
        priority: Higher means more capable; selection order follows it
    """

    name: str
    rpm: int
    tpm: int
    rpd: int
    priority: int


@dataclass
class ModelUsage:
    requests_this_minute: int = 0
    requests_today: int = 0
    tokens_this_minute: int = 0
    last_reset_minute: int = 0
    last_reset_day: int = 0


DEFAULT_MODELS = (
    ModelSpec("gemini-2.5-pro", rpm=5, tpm=250_000, rpd=100, priority=5),
    ModelSpec("gemini-2.5-flash", rpm=10, tpm=250_000, rpd=250, priority=4),
    ModelSpec("gemini-2.0-flash", rpm=15, tpm=1_000_000, rpd=200, priority=3),
    ModelSpec("gemini-2.5-flash-lite", rpm=15, tpm=250_000, rpd=1000, priority=2),
    ModelSpec("gemini-2.0-flash-lite", rpm=30, tpm=1_000_000, rpd=200, priority=1),
)


class UseCase:
    """Enum-like class for model selection use cases"""

    RESUME_GENERATION = "resume-generation"
    SIMPLE_TASK = "simple-task"
    COMPLEX_ANALYSIS = "complex-analysis"

    @classmethod
    def get_all(cls) -> Set[str]:
        return {cls.RESUME_GENERATION, cls.SIMPLE_TASK, cls.COMPLEX_ANALYSIS}


USE_CASE_TOKENS = {
    UseCase.RESUME_GENERATION: 2000,
    UseCase.SIMPLE_TASK: 500,
    UseCase.COMPLEX_ANALYSIS: 5000,
}


def load_model_catalog(config_path: Path) -> List[ModelSpec]:
    """
    Load a model catalog from YAML.

    Expected format:
        models:
          - {name: gemini-2.5-pro, rpm: 5, tpm: 250000, rpd: 100, priority: 5}
          - ...

    Raises:
        ValueError: If the file has no models or an entry is missing a limit
    """
    catalog = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    entries = catalog.get("models") if isinstance(catalog, dict) else None
    if not entries:
        raise ValueError(f"Model catalog {config_path} defines no models")

    models = []
    for entry in entries:
        try:
            models.append(
                ModelSpec(
                    name=str(entry["name"]),
                    rpm=int(entry["rpm"]),
                    tpm=int(entry["tpm"]),
                    rpd=int(entry["rpd"]),
                    priority=int(entry["priority"]),
                )
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid model entry in {config_path}: {entry}") from e
    return models


class ModelSelector:
    """
    Picks the best model with remaining rate-limit headroom.

    Example:
        selector = ModelSelector()
        model = selector.select_for_use_case("resume-generation")
        ...  # call the model
        selector.record_usage(model, response.total_tokens)
    """

    def __init__(
        self,
        models: Optional[Iterable[ModelSpec]] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            models: Model catalog (default: DEFAULT_MODELS)
            clock: Returns the current time in seconds since the epoch
        """
        self._clock = clock
        self._lock = threading.RLock()

        catalog = list(models) if models is not None else list(DEFAULT_MODELS)
        self._models: Dict[str, ModelSpec] = {model.name: model for model in catalog}

        minute, day = self._current_minute(), self._current_day()
        self._usage: Dict[str, ModelUsage] = {
            name: ModelUsage(last_reset_minute=minute, last_reset_day=day)
            for name in self._models
        }

        # Highest priority first
        self._fallback_chain = [
            model.name for model in sorted(catalog, key=lambda m: m.priority, reverse=True)
        ]

    @classmethod
    def from_env(cls, clock: Callable[[], float] = time.time) -> "ModelSelector":
        """Build a selector from MODEL_CATALOG_PATH, or the built-in catalog when unset."""
        if MODEL_CATALOG_PATH:
            return cls(load_model_catalog(Path(MODEL_CATALOG_PATH)), clock=clock)
        return cls(clock=clock)

    @property
    def fallback_chain(self) -> List[str]:
        return list(self._fallback_chain)

    # =========================================================================
    # Counters
    # =========================================================================

    def _current_minute(self) -> int:
        return int(self._clock() // SECONDS_PER_MINUTE)

    def _current_day(self) -> int:
        return int(self._clock() // SECONDS_PER_DAY)

    def _reset_counters_if_needed(self, usage: ModelUsage) -> None:
        minute, day = self._current_minute(), self._current_day()

        if minute > usage.last_reset_minute:
            usage.requests_this_minute = 0
            usage.tokens_this_minute = 0
            usage.last_reset_minute = minute

        if day > usage.last_reset_day:
            usage.requests_today = 0
            usage.last_reset_day = day

    def is_model_available(
        self, model_name: str, estimated_tokens: int = DEFAULT_ESTIMATED_TOKENS
    ) -> bool:
        """True if a request of estimated_tokens would stay within all three limits."""
        with self._lock:
            model = self._models.get(model_name)
            if model is None:
                return False

            usage = self._usage[model_name]
            self._reset_counters_if_needed(usage)

            return (
                usage.requests_this_minute < model.rpm
                and usage.tokens_this_minute + estimated_tokens <= model.tpm
                and usage.requests_today < model.rpd
            )

    def record_usage(self, model_name: str, tokens: int) -> None:
        """Count one successful request; unknown model names are ignored."""
        with self._lock:
            usage = self._usage.get(model_name)
            if usage is None:
                return

            self._reset_counters_if_needed(usage)
            usage.requests_this_minute += 1
            usage.requests_today += 1
            usage.tokens_this_minute += tokens

    # =========================================================================
    # Selection
    # =========================================================================

    def _first_available(self, candidates: Iterable[str], estimated_tokens: int) -> Optional[str]:
        for model_name in candidates:
            if self.is_model_available(model_name, estimated_tokens):
                return model_name
        return None

    def select_model(
        self,
        estimated_tokens: int = DEFAULT_ESTIMATED_TOKENS,
        prefer_high_performance: bool = True,
    ) -> Optional[str]:
        """
        Select an available model.

        Args:
            estimated_tokens: Expected size of the request
            prefer_high_performance: Try the strongest model first; when False,
                try the weakest first to conserve the stronger models' quota

        Returns:
            Model name, or None if every model is at a limit
        """
        chain = self._fallback_chain if prefer_high_performance else self._fallback_chain[::-1]
        with self._lock:
            return self._first_available(chain, estimated_tokens)

    def get_next_best_model(
        self, current_model: str, estimated_tokens: int = DEFAULT_ESTIMATED_TOKENS
    ) -> Optional[str]:
        """Next available model after current_model in priority order (from the top if unknown)."""
        if current_model in self._fallback_chain:
            start = self._fallback_chain.index(current_model) + 1
        else:
            start = 0
        with self._lock:
            return self._first_available(self._fallback_chain[start:], estimated_tokens)

    def select_for_use_case(
        self, use_case: str, estimated_tokens: Optional[int] = None
    ) -> Optional[str]:
        """
        Select a model for a named use case.

        resume-generation prefers quality with full fallback, simple-task
        prefers the cheapest model, complex-analysis only considers the
        strongest three models.

        Raises:
            ValueError: If use_case is not one of UseCase
        """
        if use_case not in UseCase.get_all():
            raise ValueError(f"Unknown use case: {use_case}. Use one of {sorted(UseCase.get_all())}")

        tokens = estimated_tokens or USE_CASE_TOKENS[use_case]

        if use_case == UseCase.SIMPLE_TASK:
            model = self.select_model(tokens, prefer_high_performance=False)
        elif use_case == UseCase.COMPLEX_ANALYSIS:
            with self._lock:
                model = self._first_available(
                    self._fallback_chain[:HIGH_PERFORMANCE_COUNT], tokens
                )
        else:
            model = self.select_model(tokens, prefer_high_performance=True)

        if model is not None:
            log_model_selected(model, use_case, tokens)
        return model

    # =========================================================================
    # Reporting
    # =========================================================================

    def get_usage_stats(self) -> Dict[str, Dict[str, Any]]:
        """Limits, current counters, availability and "used/limit" strings per model."""
        stats = {}
        with self._lock:
            for name, model in self._models.items():
                usage = self._usage[name]
                self._reset_counters_if_needed(usage)
                stats[name] = {
                    "model": {
                        "rpm": model.rpm,
                        "tpm": model.tpm,
                        "rpd": model.rpd,
                        "priority": model.priority,
                    },
                    "current": {
                        "requests_this_minute": usage.requests_this_minute,
                        "requests_today": usage.requests_today,
                        "tokens_this_minute": usage.tokens_this_minute,
                        "available": self.is_model_available(name),
                    },
                    "utilization": {
                        "rpm_usage": f"{usage.requests_this_minute}/{model.rpm}",
                        "rpd_usage": f"{usage.requests_today}/{model.rpd}",
                        "tpm_usage": f"{usage.tokens_this_minute}/{model.tpm}",
                    },
                }
        return stats

    def get_usage_summary(self) -> Dict[str, Any]:
        with self._lock:
            stats = self.get_usage_stats()
            return {
                "total_models": len(stats),
                "available_models": sum(1 for s in stats.values() if s["current"]["available"]),
                "recommended_model": self.select_for_use_case(UseCase.RESUME_GENERATION),
                "timestamp": datetime.fromtimestamp(self._clock(), tz=timezone.utc).isoformat(),
            }
