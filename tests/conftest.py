"""Shared fixtures for unit and integration tests."""

from pathlib import Path

import pytest
from loguru import logger
from omegaconf import OmegaConf

FIXTURES_PATH = Path(__file__).parent / "fixtures"


@pytest.fixture
def log_messages():
    """Capture loguru messages (all levels) emitted during a test."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def typical_resume():
    """Realistic structured resume as a raw camelCase mapping."""
    return OmegaConf.to_container(OmegaConf.load(FIXTURES_PATH / "typical_resume.yaml"))


@pytest.fixture
def make_experience():
    """Factory for raw experience entries: make_experience(index, bullets=2)."""

    def _make(index: int, bullets: int = 2, bullet_text: str = "Delivered project"):
        return {
            "role": f"Role {index}",
            "company": f"Company {index}",
            "duration": "2019 - 2021",
            "description": [f"{bullet_text} {index}.{b}" for b in range(1, bullets + 1)],
        }

    return _make


@pytest.fixture
def make_education():
    """Factory for raw education entries: make_education(index)."""

    def _make(index: int):
        return {"degree": f"Degree {index}", "school": f"School {index}", "year": "2020"}

    return _make


@pytest.fixture
def large_resume(make_experience, make_education):
    """A resume far beyond one page: overflow density and compact mode."""
    bullet = "Led a cross-functional migration that improved reliability and reduced cost"
    return {
        "name": "Grace Brewster Murray Hopper",
        "title": "Principal Engineer",
        "summary": "Engineer and team lead. " * 16,
        "experience": [make_experience(i, bullets=6, bullet_text=bullet) for i in range(1, 11)],
        "education": [make_education(i) for i in range(1, 6)],
        "skills": [f"Skill {i}" for i in range(1, 31)],
        "softSkills": [f"Soft skill {i}" for i in range(1, 11)],
        "languages": ["English", "Spanish", "German", "French", "Italian"],
        "achivements": ["Award A", "Award B", "Award C", "Award D"],
        "certifications": [{"name": f"Cert {i}", "year": "2021"} for i in range(1, 6)],
    }
