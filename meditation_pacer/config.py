"""Production-calibrated pacing constants and .env configuration loading.

WHY: The pacing numbers (speech rate, safety buffer, break limits,
punctuation weights) were calibrated against real TTS output and are the
values most likely to be tuned. Keeping them as plain module constants
makes them easy to find, and letting deployments override them through
the environment avoids code changes when a voice or engine changes.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values. load_pacing_config() reads the PACING_* variables
at call time and builds a PacingConfig, falling back to the constants.

RULES:
- Calibration: ~60 words = ~310 chars = ~26 s of speech -> 12 chars/sec
- 70 words per minute gives roughly a 50/50 speech-to-silence ratio
- The pacing core never reads the environment; only the CLI and the HTTP
  server call load_pacing_config()
- Unparseable environment values raise ValueError naming the variable
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from dotenv import load_dotenv

if TYPE_CHECKING:
    from meditation_pacer.core.ir import PacingConfig

# Load .env from the project root (where the process is started from)
load_dotenv()

# ---------------------------------------------------------------------------
# Speech rate and silence budget
# ---------------------------------------------------------------------------

CHARS_PER_SECOND = 12.0
"""Speech rate in non-whitespace characters per second."""

SILENCE_SAFETY_BUFFER = 1.1
"""Multiplier on the silence budget; TTS usually speaks faster than estimated."""

MAX_BREAK_SECONDS = 3.0
"""Longest single pause directive the TTS engine accepts."""

MIN_BREAK_SECONDS = 0.1
"""Pauses shorter than this are imperceptible and are omitted."""

DEFAULT_WORDS_PER_MINUTE = 70.0
"""Script density used to size requests to the text generator."""

MAX_BREAKS_PER_PAUSE = 10000
"""Most directives one pause may expand to; longer pauses are not rendered."""

MIN_DIRECTIVE_SECONDS = 0.1
"""Shortest max_break_seconds the HTTP API accepts (one rendered decimal place)."""

MAX_TARGET_SECONDS = 86400.0
"""Longest target duration the HTTP API accepts."""

# ---------------------------------------------------------------------------
# Punctuation weights
# ---------------------------------------------------------------------------

WEIGHT_COMMA = 1
WEIGHT_SENTENCE = 3
WEIGHT_PARAGRAPH = 5

# ---------------------------------------------------------------------------
# Environment overrides
# ---------------------------------------------------------------------------

_FLOAT_FIELDS = {
    "chars_per_second": ("PACING_CHARS_PER_SECOND", CHARS_PER_SECOND),
    "silence_safety_buffer": ("PACING_SILENCE_SAFETY_BUFFER", SILENCE_SAFETY_BUFFER),
    "max_break_seconds": ("PACING_MAX_BREAK_SECONDS", MAX_BREAK_SECONDS),
    "min_break_seconds": ("PACING_MIN_BREAK_SECONDS", MIN_BREAK_SECONDS),
}

_INT_FIELDS = {
    "weight_comma": ("PACING_WEIGHT_COMMA", WEIGHT_COMMA),
    "weight_sentence": ("PACING_WEIGHT_SENTENCE", WEIGHT_SENTENCE),
    "weight_paragraph": ("PACING_WEIGHT_PARAGRAPH", WEIGHT_PARAGRAPH),
}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(
            "Invalid value for {}: '{}' (expected a number).".format(name, raw)
        )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            "Invalid value for {}: '{}' (expected an integer).".format(name, raw)
        )


def load_pacing_config() -> PacingConfig:
    """Build a PacingConfig from PACING_* environment variables.

    WHY: Deployments tune the speech rate and weights per voice without
    touching code. The .env file is already loaded on import.

    HOW: Each field is read from its variable; unset or empty variables
    fall back to the module constants.

    RULES:
    - Raises ValueError if a set variable cannot be parsed
    - Values are not range-checked here; the pacing core tolerates
      degenerate configurations

    Returns:
        A new PacingConfig instance.
    """
    from meditation_pacer.core.ir import PacingConfig

    values = {}
    for field_name, (env_name, default) in _FLOAT_FIELDS.items():
        values[field_name] = _env_float(env_name, default)
    for field_name, (env_name, default) in _INT_FIELDS.items():
        values[field_name] = _env_int(env_name, default)
    return PacingConfig(**values)


def load_words_per_minute() -> float:
    """Return the script density from PACING_WORDS_PER_MINUTE (default 70)."""
    return _env_float("PACING_WORDS_PER_MINUTE", DEFAULT_WORDS_PER_MINUTE)
