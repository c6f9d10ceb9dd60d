"""Value types shared by the tokenizer, the pacer, and every output layer.

WHY: Tokenizing and pacing are two separate passes. They need a small,
well-typed vocabulary between them (punctuation classes, speech atoms, a
configuration bundle, and the result record) that formatters, the CLI and
the HTTP server can consume without knowing how it was computed.

HOW: One Enum and four frozen dataclasses:
  PunctuationClass: the closed set of pause-bearing punctuation kinds
  SpeechAtom: a span of spoken text plus its terminating punctuation
  PacingConfig: rate, buffer, break limits and punctuation weights
  AtomPause: the silence planned after one atom
  PacingResult: the markup string plus all timing metadata

RULES:
- Every instance is immutable; share configs freely across calls
- SpeechAtom.weight is derived from its class through a PacingConfig and
  cannot be passed in directly
- SpeechAtom.text is never empty or whitespace-only
- All durations are float seconds
"""

from __future__ import annotations

import dataclasses
from dataclasses import InitVar, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from meditation_pacer.config import (
    CHARS_PER_SECOND,
    MAX_BREAK_SECONDS,
    MIN_BREAK_SECONDS,
    SILENCE_SAFETY_BUFFER,
    WEIGHT_COMMA,
    WEIGHT_PARAGRAPH,
    WEIGHT_SENTENCE,
)


class PunctuationClass(str, Enum):
    """The kind of punctuation that ends a speech atom.

    Precedence when a run mixes several kinds:
    PARAGRAPH > SENTENCE_END > COMMA > NONE.
    """

    COMMA = "comma"
    SENTENCE_END = "sentence_end"
    PARAGRAPH = "paragraph"
    NONE = "none"


@dataclass(frozen=True)
class PacingConfig:
    """Immutable bundle of pacing constants.

    Attributes:
        chars_per_second: Speech rate in non-whitespace characters per second.
        silence_safety_buffer: Multiplier applied to the raw silence budget.
        max_break_seconds: Longest duration a single pause directive may carry.
        min_break_seconds: Pauses below this are omitted as imperceptible.
        weight_comma: Pause weight for a comma.
        weight_sentence: Pause weight for ``.``, ``?`` and ``!``.
        weight_paragraph: Pause weight for a newline.

    Values are not validated. Degenerate settings (zero rate, negative
    weights, min above max) yield degenerate results, never exceptions.
    """

    chars_per_second: float = CHARS_PER_SECOND
    silence_safety_buffer: float = SILENCE_SAFETY_BUFFER
    max_break_seconds: float = MAX_BREAK_SECONDS
    min_break_seconds: float = MIN_BREAK_SECONDS
    weight_comma: int = WEIGHT_COMMA
    weight_sentence: int = WEIGHT_SENTENCE
    weight_paragraph: int = WEIGHT_PARAGRAPH

    def weight_for(self, punctuation: PunctuationClass) -> int:
        """Return the pause weight for a punctuation class."""
        weights = {
            PunctuationClass.COMMA: self.weight_comma,
            PunctuationClass.SENTENCE_END: self.weight_sentence,
            PunctuationClass.PARAGRAPH: self.weight_paragraph,
            PunctuationClass.NONE: 0,
        }
        return weights[punctuation]

    def replace(self, **overrides: Any) -> PacingConfig:
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


DEFAULT_CONFIG = PacingConfig()
"""Production-calibrated configuration: 12 cps, 1.1x buffer, 3.0/0.1 s breaks, 1/3/5."""


@dataclass(frozen=True)
class SpeechAtom:
    """One span of spoken text and the punctuation that terminates it.

    WHY: Pauses are allocated per atom, so the pacer needs each span's
    text, its punctuation class, and the weight that class carries.

    HOW: Construct with text, class and the literal punctuation. The weight
    is looked up from ``config`` (default: DEFAULT_CONFIG) and the word count
    is computed from the text; neither can be passed in.

    RULES:
    - text is trimmed, non-empty content (ValueError otherwise)
    - punctuation_char is "" for PunctuationClass.NONE
    - weight always equals config.weight_for(punctuation)
    - word_count is the number of whitespace-delimited tokens in text
    """

    text: str
    punctuation: PunctuationClass
    punctuation_char: str = ""
    config: InitVar[Optional[PacingConfig]] = None
    weight: int = field(init=False)
    word_count: int = field(init=False)

    def __post_init__(self, config: Optional[PacingConfig]) -> None:
        if not self.text or self.text.isspace():
            raise ValueError("SpeechAtom text must not be empty or whitespace-only")
        active = config if config is not None else DEFAULT_CONFIG
        object.__setattr__(self, "weight", active.weight_for(self.punctuation))
        object.__setattr__(self, "word_count", len(self.text.split()))

    @property
    def char_count(self) -> int:
        """Number of non-whitespace characters in the text."""
        return sum(1 for c in self.text if not c.isspace())


@dataclass(frozen=True)
class AtomPause:
    """Silence planned after a single atom.

    ``silence_after`` is 0.0 for the last atom, for zero-weight atoms, and
    for pauses that fall below the minimum break length.
    """

    index: int
    text: str
    punctuation: PunctuationClass
    punctuation_char: str
    weight: int
    silence_after: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "text": self.text,
            "punctuation": self.punctuation.value,
            "punctuation_char": self.punctuation_char,
            "weight": self.weight,
            "silence_after": self.silence_after,
        }


@dataclass(frozen=True)
class PacingResult:
    """Complete output of one pacing run.

    Attributes:
        markup: Text with inline ``<break time="X.Xs"/>`` directives.
        total_chars: Non-whitespace characters across all atoms.
        total_words: Words across all atoms.
        estimated_speech_seconds: total_chars / chars_per_second.
        raw_silence_budget: max(0, target - speech), before the buffer.
        final_silence_budget: raw_silence_budget * silence_safety_buffer.
        total_silence_added: Sum of the pauses actually emitted.
        target_duration_seconds: The requested duration.
        estimated_total_seconds: Speech plus emitted silence.
        atom_count: Number of atoms the text was split into.
        pauses: Per-atom pause plan, in atom order.
    """

    markup: str
    total_chars: int
    total_words: int
    estimated_speech_seconds: float
    raw_silence_budget: float
    final_silence_budget: float
    total_silence_added: float
    target_duration_seconds: float
    estimated_total_seconds: float
    atom_count: int
    pauses: Tuple[AtomPause, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-ready dict of the result, pauses included."""
        return {
            "markup": self.markup,
            "total_chars": self.total_chars,
            "total_words": self.total_words,
            "estimated_speech_seconds": self.estimated_speech_seconds,
            "raw_silence_budget": self.raw_silence_budget,
            "final_silence_budget": self.final_silence_budget,
            "total_silence_added": self.total_silence_added,
            "target_duration_seconds": self.target_duration_seconds,
            "estimated_total_seconds": self.estimated_total_seconds,
            "atom_count": self.atom_count,
            "pauses": [p.to_dict() for p in self.pauses],
        }
