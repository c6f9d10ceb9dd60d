"""Distribute a silence budget across speech atoms and emit pause markup.

WHY: Asking a language model or a TTS engine to "take about five minutes"
is unreliable. Instead the script is measured, its speech time estimated,
and the remaining time is spread mathematically over the punctuation so
that speech plus pauses lands on the requested duration.

HOW: Four steps over the atom list produced by the tokenizer:
  1. Measure non-whitespace characters and words.
  2. Estimate speech time as chars / chars_per_second.
  3. Budget silence as max(0, target - speech) times the safety buffer.
  4. Share the budget by weight among every atom except the last, and
     render each share as one or more ``<break time="X.Xs"/>`` directives.

RULES:
- Never raises: every division is guarded and substitutes 0
- No pause follows the final atom, and no space either
- A share below min_break_seconds is omitted entirely
- Each directive is at most max_break_seconds; a remainder at or below
  min_break_seconds is dropped
- Directive durations use one decimal place and a period separator
"""

from __future__ import annotations

import logging
import math
import re
from typing import List, Optional, Sequence, Tuple

from meditation_pacer.config import MAX_BREAKS_PER_PAUSE
from meditation_pacer.core.ir import (
    DEFAULT_CONFIG,
    AtomPause,
    PacingConfig,
    PacingResult,
    SpeechAtom,
)
from meditation_pacer.core.tokenizer import count_chars

logger = logging.getLogger(__name__)

BREAK_TEMPLATE = '<break time="{:.1f}s"/>'
BREAK_RE = re.compile(r'<break\s+time="[^"]*"\s*/>')


def estimate_speech_seconds(text: str, config: Optional[PacingConfig] = None) -> float:
    """Estimated speaking time of text at the configured character rate.

    Returns 0.0 when chars_per_second is not positive.
    """
    active = config if config is not None else DEFAULT_CONFIG
    return _speech_seconds(count_chars(text), active)


def _speech_seconds(total_chars: int, config: PacingConfig) -> float:
    if config.chars_per_second <= 0:
        return 0.0
    return total_chars / config.chars_per_second


def is_renderable(total_seconds: float, config: Optional[PacingConfig] = None) -> bool:
    """Whether a pause can be written as a bounded chain of directives.

    False when max_break_seconds is not positive, the pause is not finite,
    or it would need more than MAX_BREAKS_PER_PAUSE directives.
    """
    active = config if config is not None else DEFAULT_CONFIG
    if active.max_break_seconds <= 0 or not math.isfinite(total_seconds):
        return False
    return total_seconds / active.max_break_seconds <= MAX_BREAKS_PER_PAUSE


def format_break_tags(total_seconds: float, config: Optional[PacingConfig] = None) -> str:
    """Render one pause as a chain of break directives.

    WHY: The TTS engine caps a single directive (3 s by default), so longer
    pauses must be chained to keep their full length.

    HOW: Repeatedly emit min(remaining, max_break_seconds) and subtract,
    until what remains is at or below min_break_seconds.

    RULES:
    - 2.0 -> one 2.0s directive; 5.0 -> 3.0s + 2.0s; 9.0 -> three 3.0s
    - Returns "" when the pause is not renderable (see is_renderable)
    - A negative min_break_seconds is treated as 0
    - Never emits more than MAX_BREAKS_PER_PAUSE directives
    """
    active = config if config is not None else DEFAULT_CONFIG
    if not is_renderable(total_seconds, active):
        return ""

    floor = max(active.min_break_seconds, 0.0)
    parts: List[str] = []
    remaining = total_seconds
    for _ in range(MAX_BREAKS_PER_PAUSE):
        if remaining <= floor:
            break
        chunk = min(remaining, active.max_break_seconds)
        parts.append(BREAK_TEMPLATE.format(chunk))
        remaining -= chunk
    return "".join(parts)


def strip_break_directives(markup: str) -> str:
    """Remove every break directive, leaving the spoken text."""
    return BREAK_RE.sub("", markup)


def _total_weight(atoms: Sequence[SpeechAtom]) -> int:
    # The final atom never carries a pause.
    if len(atoms) < 2:
        return 0
    return sum(atom.weight for atom in atoms[:-1])


def distribute_silence(
    atoms: Sequence[SpeechAtom],
    silence_budget: float,
    config: Optional[PacingConfig] = None,
) -> Tuple[AtomPause, ...]:
    """Share a silence budget among atoms in proportion to their weights.

    WHY: Commas, sentence ends and paragraph breaks deserve different pause
    lengths; weights express their relative share of the total silence.

    HOW: time_per_unit = budget / (sum of weights of all but the last
    atom). Each non-last atom gets weight * time_per_unit, kept only if it
    reaches min_break_seconds and can be rendered (is_renderable).

    RULES:
    - The last atom always gets 0.0
    - A zero-weight atom (including a mid-text NONE atom) gets 0.0
    - Zero or negative total weight or budget yields all zeros

    Args:
        atoms: Atoms in text order.
        silence_budget: Seconds of silence to distribute (after the buffer).
        config: Supplies min/max break lengths. Default: DEFAULT_CONFIG.

    Returns:
        One AtomPause per atom, in order.
    """
    active = config if config is not None else DEFAULT_CONFIG
    total_weight = _total_weight(atoms)
    time_per_unit = silence_budget / total_weight if total_weight > 0 else 0.0

    last_index = len(atoms) - 1
    pauses: List[AtomPause] = []
    for i, atom in enumerate(atoms):
        silence_after = 0.0
        if i != last_index and atom.weight > 0 and time_per_unit > 0:
            duration = atom.weight * time_per_unit
            if duration >= active.min_break_seconds and is_renderable(duration, active):
                silence_after = duration
        pauses.append(AtomPause(
            index=i,
            text=atom.text,
            punctuation=atom.punctuation,
            punctuation_char=atom.punctuation_char,
            weight=atom.weight,
            silence_after=silence_after,
        ))
    return tuple(pauses)


def _render_markup(pauses: Sequence[AtomPause], config: PacingConfig) -> str:
    last_index = len(pauses) - 1
    parts: List[str] = []
    for pause in pauses:
        parts.append(pause.text)
        parts.append(pause.punctuation_char)
        if pause.silence_after > 0:
            parts.append(format_break_tags(pause.silence_after, config))
        if pause.index != last_index:
            parts.append(" ")
    return "".join(parts)


def pace(
    atoms: Sequence[SpeechAtom],
    target_duration_seconds: float,
    config: Optional[PacingConfig] = None,
) -> PacingResult:
    """Compute the silence budget for atoms and emit paced markup.

    WHY: This is the second half of the pipeline and the only place where
    timing is decided. It is a pure function; callers inspect the returned
    metadata to detect overruns rather than catching exceptions.

    HOW: Measure, estimate speech, budget silence with the safety buffer,
    distribute by weight (distribute_silence), then render markup.

    RULES:
    - raw_silence_budget is clamped at 0 when speech exceeds the target
    - final_silence_budget == raw_silence_budget * silence_safety_buffer
    - total_silence_added is the sum of the emitted pauses
    - estimated_total_seconds == estimated_speech_seconds + total_silence_added

    Args:
        atoms: Output of tokenize().
        target_duration_seconds: Requested total duration.
        config: Pacing constants. Default: DEFAULT_CONFIG.

    Returns:
        A PacingResult; never raises.
    """
    active = config if config is not None else DEFAULT_CONFIG

    total_chars = sum(atom.char_count for atom in atoms)
    total_words = sum(atom.word_count for atom in atoms)

    estimated_speech_seconds = _speech_seconds(total_chars, active)
    raw_silence_budget = max(0.0, target_duration_seconds - estimated_speech_seconds)
    final_silence_budget = raw_silence_budget * active.silence_safety_buffer

    pauses = distribute_silence(atoms, final_silence_budget, active)
    total_silence_added = sum(p.silence_after for p in pauses)
    markup = _render_markup(pauses, active)

    estimated_total_seconds = estimated_speech_seconds + total_silence_added
    if estimated_speech_seconds > target_duration_seconds:
        logger.debug(
            "Speech estimate %.2fs exceeds target %.2fs; no silence added",
            estimated_speech_seconds, target_duration_seconds,
        )
    logger.debug(
        "Paced %d atoms (%d chars, %d words): speech %.2fs + silence %.2fs = %.2fs (target %.2fs)",
        len(atoms), total_chars, total_words, estimated_speech_seconds,
        total_silence_added, estimated_total_seconds, target_duration_seconds,
    )

    return PacingResult(
        markup=markup,
        total_chars=total_chars,
        total_words=total_words,
        estimated_speech_seconds=estimated_speech_seconds,
        raw_silence_budget=raw_silence_budget,
        final_silence_budget=final_silence_budget,
        total_silence_added=total_silence_added,
        target_duration_seconds=target_duration_seconds,
        estimated_total_seconds=estimated_total_seconds,
        atom_count=len(atoms),
        pauses=pauses,
    )
