"""Meditation pacer: fit a spoken script to a target duration with pause markup.

WHY: Guided meditation audio must run for the length the listener chose,
but a TTS engine speaks a script as fast as it can. This package turns raw
script text into markup with explicit pause directives so that speech plus
silence matches the requested duration.

HOW: The public entry points are three pure functions:
  compute_pacing(): full PacingResult with timing metadata
  format_markup(): just the markup string, default configuration
  target_word_count(): how many words to request from a text generator
All of them delegate to core.tokenizer.tokenize() and core.pacer.pace().

RULES:
- Entry points never raise for any text or duration
- Configuration is passed in as a value; nothing reads the environment
  here (see config.load_pacing_config() for that)
- Markup directives have the exact form <break time="X.Xs"/>
"""

import math
from typing import Optional

from meditation_pacer.config import DEFAULT_WORDS_PER_MINUTE
from meditation_pacer.core.ir import (
    DEFAULT_CONFIG,
    AtomPause,
    PacingConfig,
    PacingResult,
    PunctuationClass,
    SpeechAtom,
)
from meditation_pacer.core.pacer import pace
from meditation_pacer.core.tokenizer import tokenize

__version__ = "0.1.0"

__all__ = [
    "compute_pacing",
    "format_markup",
    "target_word_count",
    "tokenize",
    "pace",
    "AtomPause",
    "PacingConfig",
    "PacingResult",
    "PunctuationClass",
    "SpeechAtom",
    "DEFAULT_CONFIG",
]


def compute_pacing(
    text: str,
    target_duration_seconds: float,
    config: Optional[PacingConfig] = None,
) -> PacingResult:
    """Tokenize text and pace it to the target duration.

    WHY: Callers that need to validate or log the estimated duration use
    this instead of format_markup().

    HOW: tokenize() with the config's weights, then pace().

    Args:
        text: Complete script text.
        target_duration_seconds: Requested total duration in seconds.
        config: Pacing constants. Default: DEFAULT_CONFIG.

    Returns:
        PacingResult with markup and timing metadata.
    """
    active = config if config is not None else DEFAULT_CONFIG
    atoms = tokenize(text, active)
    return pace(atoms, target_duration_seconds, active)


def format_markup(text: str, target_duration_seconds: float) -> str:
    """Return only the paced markup, using the default configuration."""
    return compute_pacing(text, target_duration_seconds).markup


def target_word_count(
    target_duration_seconds: float,
    words_per_minute: float = DEFAULT_WORDS_PER_MINUTE,
) -> int:
    """Number of words to request for a script of the given duration.

    round(minutes * words_per_minute), halves rounded up. At the default
    70 wpm a 5 minute script is 350 words, about half speech and half
    silence. Non-positive or NaN sizes give 0.
    """
    words = (target_duration_seconds / 60.0) * words_per_minute
    if not words > 0:
        return 0
    return int(math.floor(words + 0.5))
