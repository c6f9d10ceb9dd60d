"""Shared test fixtures for the meditation_pacer test suite.

WHY: Several test modules pace the same scripts. Keeping them here means
every module checks the same worked numbers.

HOW: Plain pytest fixtures return script strings and configurations.

RULES:
- WELCOME_SCRIPT has 22 non-whitespace characters and 5 words
- CALIBRATION_SCRIPT is roughly 310 characters (~26 s at 12 cps)
- Environment variables that affect configuration are cleared per test
"""

import pytest

from meditation_pacer.core.ir import DEFAULT_CONFIG, PacingConfig

WELCOME_SCRIPT = "Welcome. Take a deep breath."

CALIBRATION_SCRIPT = (
    "Welcome to this moment of peace. "
    "Close your eyes gently. "
    "Take a slow, deep breath in. "
    "Feel the air fill your lungs completely. "
    "Now exhale slowly, releasing all tension. "
    "Notice how your body begins to relax. "
    "Each breath brings you deeper into calm. "
    "Let go of any thoughts that arise. "
    "Simply be present in this moment. "
    "You are safe. You are at peace."
)

PARAGRAPH_SCRIPT = (
    "Settle into your seat, and let your hands rest.\n"
    "Breathe in slowly. Breathe out.\n"
    "Stay here a while."
)

PACING_ENV_VARS = (
    "PACING_CHARS_PER_SECOND",
    "PACING_SILENCE_SAFETY_BUFFER",
    "PACING_MAX_BREAK_SECONDS",
    "PACING_MIN_BREAK_SECONDS",
    "PACING_WEIGHT_COMMA",
    "PACING_WEIGHT_SENTENCE",
    "PACING_WEIGHT_PARAGRAPH",
    "PACING_WORDS_PER_MINUTE",
)


@pytest.fixture(autouse=True)
def _clean_pacing_env(monkeypatch):
    """Keep a developer's .env or shell from leaking into tests."""
    for name in PACING_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def default_config() -> PacingConfig:
    return DEFAULT_CONFIG


@pytest.fixture
def welcome_script() -> str:
    return WELCOME_SCRIPT


@pytest.fixture
def calibration_script() -> str:
    return CALIBRATION_SCRIPT


@pytest.fixture
def paragraph_script() -> str:
    return PARAGRAPH_SCRIPT
