"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and OpenAPI documentation. The pacing core
accepts any configuration, but an HTTP client sending a zero speech rate
is almost certainly a bug, so the API rejects it at the edge.

HOW: One request model for pacing, one nested config model, and a
response model per endpoint. PacingResponse mirrors PacingResult field
for field so it can be built from PacingResult.to_dict().

RULES:
- All models use Field(description=...) for OpenAPI documentation
- PacingConfigModel fields default to the production-calibrated constants
- chars_per_second must be positive and max_break_seconds at least
  MIN_DIRECTIVE_SECONDS; weights and min_break_seconds must be non-negative
- target_duration_seconds is at most MAX_TARGET_SECONDS (one day)
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from meditation_pacer.config import (
    CHARS_PER_SECOND,
    DEFAULT_WORDS_PER_MINUTE,
    MAX_BREAK_SECONDS,
    MAX_TARGET_SECONDS,
    MIN_BREAK_SECONDS,
    MIN_DIRECTIVE_SECONDS,
    SILENCE_SAFETY_BUFFER,
    WEIGHT_COMMA,
    WEIGHT_PARAGRAPH,
    WEIGHT_SENTENCE,
)
from meditation_pacer.core.ir import PacingConfig, PunctuationClass


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class PacingConfigModel(BaseModel):
    """Optional per-request pacing configuration."""

    chars_per_second: float = Field(
        default=CHARS_PER_SECOND, gt=0,
        description="Speech rate in non-whitespace characters per second.",
    )
    silence_safety_buffer: float = Field(
        default=SILENCE_SAFETY_BUFFER, ge=0,
        description="Multiplier applied to the raw silence budget.",
    )
    max_break_seconds: float = Field(
        default=MAX_BREAK_SECONDS, ge=MIN_DIRECTIVE_SECONDS,
        description="Longest duration of a single pause directive.",
    )
    min_break_seconds: float = Field(
        default=MIN_BREAK_SECONDS, ge=0,
        description="Pauses shorter than this are omitted.",
    )
    weight_comma: int = Field(default=WEIGHT_COMMA, ge=0, description="Pause weight for a comma.")
    weight_sentence: int = Field(
        default=WEIGHT_SENTENCE, ge=0, description="Pause weight for '.', '?' and '!'.",
    )
    weight_paragraph: int = Field(
        default=WEIGHT_PARAGRAPH, ge=0, description="Pause weight for a newline.",
    )

    def to_config(self) -> PacingConfig:
        return PacingConfig(**self.model_dump())


class PacingRequest(BaseModel):
    """Script text and target duration to pace.

    WHY: Both pacing endpoints take the same input; only the response
    differs.

    RULES:
    - text may be empty (yields empty markup)
    - config is optional; the server's environment configuration applies
      when it is omitted
    """

    text: str = Field(description="Complete meditation script text.")
    target_duration_seconds: float = Field(
        le=MAX_TARGET_SECONDS,
        description="Requested total duration (speech plus pauses) in seconds, at most one day.",
    )
    config: Optional[PacingConfigModel] = Field(
        default=None,
        description="Pacing configuration. Defaults to the server configuration.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "text": "Welcome. Take a deep breath.",
                "target_duration_seconds": 60.0,
            }
        ]
    }}


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class AtomPauseModel(BaseModel):
    """Silence planned after one speech atom."""

    index: int = Field(description="Position of the atom in the script.")
    text: str = Field(description="Trimmed atom text.")
    punctuation: PunctuationClass = Field(description="Punctuation class ending the atom.")
    punctuation_char: str = Field(description="Literal punctuation reproduced in the markup.")
    weight: int = Field(description="Pause weight of the punctuation class.")
    silence_after: float = Field(description="Seconds of silence emitted after the atom.")


class PacingResponse(BaseModel):
    """Full pacing result with timing metadata.

    WHY: Clients compare estimated_total_seconds with the target to detect
    scripts that are too long, instead of relying on an error status.
    """

    markup: str = Field(description='Script with inline <break time="X.Xs"/> directives.')
    total_chars: int = Field(description="Non-whitespace characters across all atoms.")
    total_words: int = Field(description="Words across all atoms.")
    estimated_speech_seconds: float = Field(description="Estimated speaking time.")
    raw_silence_budget: float = Field(description="Silence budget before the safety buffer.")
    final_silence_budget: float = Field(description="Silence budget after the safety buffer.")
    total_silence_added: float = Field(description="Silence actually emitted.")
    target_duration_seconds: float = Field(description="The requested duration.")
    estimated_total_seconds: float = Field(description="Speech plus emitted silence.")
    atom_count: int = Field(description="Number of speech atoms.")
    pauses: List[AtomPauseModel] = Field(description="Per-atom pause plan.")


class MarkupResponse(BaseModel):
    """Only the paced markup."""

    markup: str = Field(description='Script with inline <break time="X.Xs"/> directives.')


class TargetWordsResponse(BaseModel):
    """Word count to request from a script generator."""

    duration_seconds: float = Field(description="Requested script duration in seconds.")
    words_per_minute: float = Field(
        default=DEFAULT_WORDS_PER_MINUTE, description="Script density used for sizing.",
    )
    target_words: int = Field(description="Number of words to request.")


class FormatInfo(BaseModel):
    """Description of an available output format."""

    key: str = Field(description="Format identifier.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-paced.ssml').")
    media_type: str = Field(description="MIME type of the output.")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
