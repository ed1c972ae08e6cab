"""
LLM-based structuring of free-text career details into a ResumeRecord.

The model is asked for a single JSON object in the resume schema below. The
reply is parsed tolerantly (markdown fences and surrounding prose are
ignored) and normalized with ResumeRecord.from_dict, so missing optional
sections never fail the call. A reply without a name is rejected.
"""

import json
from typing import Optional

from pagefit.contexts.intake.exceptions import InvalidModelResponseError, ModelQuotaExhaustedError
from pagefit.contexts.intake.logger import log_model_fallback, log_structuring_result
from pagefit.contexts.intake.model_selector import USE_CASE_TOKENS, ModelSelector, UseCase
from pagefit.contexts.preprocessing.resume_record import ResumeRecord
from pagefit.utils.llm import LLMProvider, LLMResponse, get_provider, parse_json_object

# Longest raw input passed to the model
MAX_RAW_TEXT_CHARS = 12000

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

_SYSTEM_PROMPT = """\
You are a professional resume writer. Turn the candidate's free-text career details into a
structured resume tailored to the target role.
Return ONLY a JSON object matching the requested schema. Use empty strings or empty lists for
information you cannot find. Never invent employers, degrees, dates or certifications."""

_USER_PROMPT_TEMPLATE = """\
Target role: {target_role}
{name_line}
Structure the career details below into a JSON object with exactly this shape:

{schema_json}

Guidelines:
- Write "summary" as 2-4 sentences aimed at the target role.
- Order "experience" and "education" from most recent to oldest.
- Each experience "description" is a list of concise, achievement-focused bullets.
- Keep skills as short noun phrases, one per list item.

---
Career details:
{raw_text}"""

_RESUME_SCHEMA = {
    "name": "Full name",
    "title": "Professional title aligned with the target role",
    "contact": {"email": "", "phone": "", "address": "", "linkedin": ""},
    "summary": "Short professional summary",
    "experience": [
        {"role": "", "company": "", "duration": "", "description": ["bullet", "bullet"]}
    ],
    "education": [{"degree": "", "school": "", "year": ""}],
    "certifications": [{"name": "", "year": ""}],
    "achievements": ["achievement"],
    "volunteer": [{"role": "", "org": "", "duration": "", "description": ["bullet"]}],
    "skills": ["skill"],
    "softSkills": ["soft skill"],
    "languages": ["language"],
    "interests": ["interest"],
}


def build_structuring_prompt(
    raw_text: str, target_role: str, full_name: Optional[str] = None
) -> str:
    """
    Build the user prompt for structuring a resume.

    Args:
        raw_text: Free-text career details
        target_role: Role the resume should be tailored to
        full_name: Candidate name to use verbatim, if known

    Returns:
        User prompt string for the LLM
    """
    name_line = f"Full name (use exactly): {full_name}\n" if full_name else ""
    return _USER_PROMPT_TEMPLATE.format(
        target_role=target_role,
        name_line=name_line,
        schema_json=json.dumps(_RESUME_SCHEMA, indent=2, ensure_ascii=False),
        raw_text=raw_text[:MAX_RAW_TEXT_CHARS],
    )


# =============================================================================
# STRUCTURING
# =============================================================================


def _generate_with_fallback(
    llm: LLMProvider,
    selector: ModelSelector,
    user_prompt: str,
) -> LLMResponse:
    """
    Call the provider on the best available model, moving down the fallback
    chain whenever a call fails with the provider's fallback exception.

    Raises:
        ModelQuotaExhaustedError: If no model is available or every model failed
    """
    use_case = UseCase.RESUME_GENERATION
    estimated_tokens = USE_CASE_TOKENS[use_case]

    model = selector.select_for_use_case(use_case)
    tried = []

    while model is not None:
        tried.append(model)
        llm.update_model(model)
        try:
            response = llm.generate(system_prompt=_SYSTEM_PROMPT, user_prompt=user_prompt)
        except llm.fallback_exception as e:
            next_model = selector.get_next_best_model(model, estimated_tokens)
            log_model_fallback(model, e, next_model)
            model = next_model
            continue

        selector.record_usage(model, response.total_tokens)
        return response

    raise ModelQuotaExhaustedError(use_case, tried)


def structure_resume(
    raw_text: str,
    target_role: str,
    full_name: Optional[str] = None,
    provider: Optional[LLMProvider] = None,
    selector: Optional[ModelSelector] = None,
) -> ResumeRecord:
    """
    Structure free-text career details into a ResumeRecord.

    Args:
        raw_text: Free-text career details
        target_role: Role the resume should be tailored to
        full_name: Candidate name, passed to the model verbatim
        provider: LLM provider (default: get_provider(), from LLM_PROVIDER)
        selector: Rate-limit tracker (default: ModelSelector.from_env()); pass a
            long-lived instance so usage is tracked across calls

    Returns:
        Normalized ResumeRecord

    Raises:
        ModelQuotaExhaustedError: If no model has headroom or all attempts failed
        InvalidModelResponseError: If the reply is not a resume with a name
    """
    selector = selector or ModelSelector.from_env()
    llm = provider or get_provider()

    user_prompt = build_structuring_prompt(raw_text, target_role, full_name)
    response = _generate_with_fallback(llm, selector, user_prompt)

    record = ResumeRecord.from_dict(parse_json_object(response.content))
    if not record.name.strip():
        raise InvalidModelResponseError("reply has no resume name", model=response.model)

    log_structuring_result(response.model, response.total_tokens, record.name)
    return record
