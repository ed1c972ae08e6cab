"""
Integration tests for the full pipeline: structuring, preprocessing, layout
and template context assembly.
"""

import json

import pytest

from pagefit.contexts.intake import ModelSelector, structure_resume
from pagefit.contexts.layout import TemplateKind, UnknownTemplateError
from pagefit.contexts.rendering import build_template_context
from pagefit.utils.llm import LLMProvider, LLMResponse

CONTEXT_KEYS = {
    "template_kind",
    "resume",
    "layout",
    "hints",
    "metrics",
    "styles",
    "classes",
    "print_css",
    "preprocessed",
}


class CannedProvider(LLMProvider):
    """Provider that always replies with the same text."""

    _provider_prefix = "canned"
    _retry_message = "Canned provider busy"

    def __init__(self, reply: str):
        self._retryable_exception = TimeoutError
        self._fallback_exception = ConnectionError
        self.reply = reply
        self.update_model("unset")

    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        return LLMResponse(content=self.reply, model=self.model, input_tokens=800, output_tokens=400)


@pytest.mark.integration
def test_typical_resume_context(typical_resume):
    """Test the context for a typical resume on every template."""
    for template_kind in sorted(TemplateKind.get_all()):
        context = build_template_context(typical_resume, template_kind)

        assert set(context) == CONTEXT_KEYS
        assert context["preprocessed"] is True
        assert context["template_kind"] == template_kind
        assert context["layout"]["template_type"] == template_kind
        assert context["resume"]["name"] == "Ada Lovelace"
        assert context["resume"]["skills"].count("Python") == 1
        assert "@media print" in context["print_css"]


@pytest.mark.integration
def test_large_resume_respects_creative_caps(large_resume):
    """Test that a large resume is capped by the creative overflow layout."""
    context = build_template_context(large_resume, TemplateKind.CREATIVE)

    assert context["preprocessed"] is True
    assert context["layout"]["compact_mode"] is True
    assert context["metrics"]["contentDensity"] == "overflow"
    assert context["hints"]["compactMode"] is True

    resume = context["resume"]
    assert len(resume["experience"]) <= 3
    assert all(len(exp["description"]) <= 2 for exp in resume["experience"])
    assert len(resume["achievements"]) <= context["layout"]["max_achievements"]
    assert context["styles"]["sidebar"] is None


@pytest.mark.integration
def test_missing_resume_falls_back_to_raw_data(log_messages):
    """Test that a None resume renders an empty record after logging the failure."""
    context = build_template_context(None, TemplateKind.MODERN)

    assert context["preprocessed"] is False
    assert context["hints"] is None
    assert context["metrics"] is None
    assert context["resume"]["experience"] == []
    assert any("falling back to raw data" in message for message in log_messages)


@pytest.mark.integration
def test_preprocessing_failure_falls_back(monkeypatch, typical_resume, log_messages):
    """Test that any preprocessing error is contained and the raw record rendered."""

    def broken_preprocess(resume, template_kind):
        raise RuntimeError("boom")

    monkeypatch.setattr(
        "pagefit.contexts.rendering.template_context.preprocess_resume", broken_preprocess
    )

    context = build_template_context(typical_resume, TemplateKind.MODERN)

    assert context["preprocessed"] is False
    assert context["resume"]["name"] == "Ada Lovelace"
    # Raw fallback keeps the duplicate skill; the layout caps still apply
    assert context["resume"]["skills"].count("Python") == 2
    assert len(context["resume"]["experience"]) <= context["layout"]["max_experience_items"]
    assert any("RuntimeError: boom" in message for message in log_messages)


@pytest.mark.integration
def test_unknown_template_is_not_swallowed(typical_resume):
    """Test that an unknown template kind propagates instead of falling back."""
    with pytest.raises(UnknownTemplateError):
        build_template_context(typical_resume, "brutalist")


@pytest.mark.integration
def test_structured_resume_renders(typical_resume):
    """Test free text -> structured record -> template context."""
    provider = CannedProvider(json.dumps(typical_resume))
    selector = ModelSelector(clock=lambda: 0.0)

    record = structure_resume(
        "Ada Lovelace, data engineer with ten years of pipeline work...",
        "Staff Data Engineer",
        provider=provider,
        selector=selector,
    )
    context = build_template_context(record, TemplateKind.MODERN)

    assert context["preprocessed"] is True
    assert context["resume"]["name"] == "Ada Lovelace"
    assert context["metrics"]["experienceCount"] == 3
    assert selector.get_usage_stats()["gemini-2.5-pro"]["current"]["requests_today"] == 1
