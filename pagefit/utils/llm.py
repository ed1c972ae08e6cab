"""
LLM provider abstraction and response parsing utilities.

Provides a provider-agnostic interface for the external structuring model with
automatic retries on transient errors, and a tolerant JSON object parser for
model replies.
"""

import json
import os
import re
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import partial
from typing import Callable, TypeVar

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

MAX_RETRIES = 5
BASE_DELAY = 1.0
MAX_OUTPUT_TOKENS = 4096

T = TypeVar("T")


def _retry_with_backoff(
    operation: Callable[[], T],
    retryable_exception: type[Exception],
    error_message: str,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Execute operation with exponential backoff retry on a specific exception.

    Args:
        operation: Callable that performs the API request and returns result
        retryable_exception: Exception type that triggers retry
        error_message: Message prefix for retry logging (e.g., "API overloaded")
        sleep: Delay function (injectable for tests)
    """
    for attempt in range(MAX_RETRIES):
        try:
            return operation()
        except retryable_exception:
            if attempt == MAX_RETRIES - 1:
                raise
            delay = BASE_DELAY * (2**attempt)
            logger.warning(
                f"{error_message}, retrying in {delay:.1f}s... "
                f"(attempt {attempt + 1}/{MAX_RETRIES})"
            )
            sleep(delay)


@dataclass
class LLMResponse:
    """Response from an LLM provider."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMProvider(ABC):
    """
    Abstract base for LLM providers.

    Subclasses must:
    - Set _provider_prefix class attribute (e.g., "gemini", "openai")
    - Set self._retryable_exception to the exception type that triggers retry
    - Set self._fallback_exception to the exception type after which another
      model should be tried
    - Implement _call_api() for the actual API call
    - Call update_model(model) in __init__ to set model and name
    """

    _provider_prefix: str
    _retryable_exception: type[Exception]
    _fallback_exception: type[Exception]
    _retry_message: str

    name: str
    model: str

    def update_model(self, model: str):
        """Update the model and refresh the provider name."""
        self.model = model
        self.name = f"{self._provider_prefix}/{model}"

    @property
    def fallback_exception(self) -> type[Exception]:
        return self._fallback_exception

    @abstractmethod
    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        """Make a single API call (no retries). Implemented by subclasses."""

    def generate(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        """Generate a response from the LLM with automatic retry on transient errors."""
        return _retry_with_backoff(
            partial(self._call_api, system_prompt, user_prompt),
            self._retryable_exception,
            self._retry_message,
        )


class GeminiProvider(LLMProvider):
    """Google Gemini provider (google-genai SDK) with exponential backoff retry."""

    _provider_prefix = "gemini"
    _retry_message = "Model overloaded"

    def __init__(self, model: str = "gemini-2.5-flash"):
        # Lazy import - only load the SDK if this provider is used
        try:
            from google import genai
            from google.genai import errors, types
        except ImportError:
            raise ImportError("google-genai package required. Install with: pip install google-genai")

        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not api_key:
            raise ValueError("GEMINI_API_KEY environment variable not set")

        self.client = genai.Client(api_key=api_key)
        self._types = types
        self._retryable_exception = errors.ServerError
        self._fallback_exception = errors.APIError
        self.update_model(model)

    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        response = self.client.models.generate_content(
            model=self.model,
            contents=user_prompt,
            config=self._types.GenerateContentConfig(
                system_instruction=system_prompt,
                max_output_tokens=MAX_OUTPUT_TOKENS,
                response_mime_type="application/json",
            ),
        )
        usage = response.usage_metadata
        return LLMResponse(
            content=response.text or "",
            model=self.model,
            input_tokens=(usage.prompt_token_count or 0) if usage else 0,
            output_tokens=(usage.candidates_token_count or 0) if usage else 0,
        )


class OpenAIProvider(LLMProvider):
    """OpenAI GPT provider with exponential backoff retry."""

    _provider_prefix = "openai"
    _retry_message = "Rate limit hit"

    def __init__(self, model: str = "gpt-4o-mini"):
        try:
            import openai
        except ImportError:
            raise ImportError("openai package required. Install with: pip install openai")

        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")

        self.client = openai.OpenAI(api_key=api_key)
        self._retryable_exception = openai.RateLimitError
        self._fallback_exception = openai.APIError
        self.update_model(model)

    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        response = self.client.chat.completions.create(
            model=self.model,
            max_tokens=MAX_OUTPUT_TOKENS,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=self.model,
            input_tokens=response.usage.prompt_tokens,
            output_tokens=response.usage.completion_tokens,
        )


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider with exponential backoff retry."""

    _provider_prefix = "anthropic"
    _retry_message = "API overloaded"

    def __init__(self, model: str = "claude-sonnet-4-20250514"):
        try:
            import anthropic
        except ImportError:
            raise ImportError("anthropic package required. Install with: pip install anthropic")

        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        self.client = anthropic.Anthropic(api_key=api_key)
        self._retryable_exception = anthropic.OverloadedError
        self._fallback_exception = anthropic.APIError
        self.update_model(model)

    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=MAX_OUTPUT_TOKENS,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        return LLMResponse(
            content=response.content[0].text,
            model=self.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )


PROVIDERS = {
    "gemini": GeminiProvider,
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}


def get_provider(provider_name: str = None, model: str = None) -> LLMProvider:
    """
    Get an LLM provider instance.

    Args:
        provider_name: "gemini", "openai" or "anthropic" (default: LLM_PROVIDER env var)
        model: Model name (default: provider-specific default)

    Returns:
        LLMProvider instance
    """
    if provider_name is None:
        provider_name = os.getenv("LLM_PROVIDER", "gemini").lower()

    if provider_name not in PROVIDERS:
        raise ValueError(f"Unknown provider: {provider_name}. Use one of {sorted(PROVIDERS)}")

    provider_cls = PROVIDERS[provider_name]
    return provider_cls(model=model) if model else provider_cls()


def parse_json_object(text: str) -> dict:
    """
    Parse a JSON object from an LLM reply.

    Tries, in order: the raw text, the text with markdown code fences removed,
    and the span from the first "{" to the last "}".

    Returns:
        Parsed dict, or an empty dict if nothing parses to a JSON object
    """
    text = (text or "").strip()

    candidates = [text]

    unfenced = re.sub(r"^```(?:json)?\s*", "", text)
    unfenced = re.sub(r"\s*```$", "", unfenced)
    candidates.append(unfenced)

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            result = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(result, dict):
            return result

    return {}
