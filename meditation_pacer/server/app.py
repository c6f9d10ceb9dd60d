"""FastAPI application exposing the pacing functions over HTTP.

WHY: The app that renders meditation audio is not written in Python.
An HTTP API lets it pace scripts, size generator prompts, and read timing
metadata without embedding the core.

HOW: A stateless FastAPI app. Each endpoint validates its input with the
pydantic models, calls the pure pacing functions, and returns the result.
When a request carries no config, the server's environment configuration
(load_pacing_config) applies.

RULES:
- No job store and no background tasks; every request is independent
- Error responses use the ErrorResponse schema
- A speech overrun is not an error; clients inspect the metadata
- Pacing handlers are plain functions so FastAPI runs them in its threadpool
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query

from meditation_pacer import __version__, compute_pacing, target_word_count
from meditation_pacer.config import load_pacing_config, load_words_per_minute
from meditation_pacer.core.ir import PacingConfig, PacingResult
from meditation_pacer.formatters import FORMATTERS
from meditation_pacer.server.models import (
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    MarkupResponse,
    PacingRequest,
    PacingResponse,
    TargetWordsResponse,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Meditation Pacer API",
    description=(
        "Fits meditation scripts to a target duration by inserting pause "
        "directives for a TTS engine, and sizes script requests for a "
        "text generator."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve_config(request: PacingRequest) -> PacingConfig:
    """Use the request's config, or the server's environment configuration."""
    if request.config is not None:
        return request.config.to_config()
    try:
        return load_pacing_config()
    except ValueError as exc:
        logger.error("Invalid server pacing configuration: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))


def _run(request: PacingRequest) -> PacingResult:
    config = _resolve_config(request)
    result = compute_pacing(request.text, request.target_duration_seconds, config)
    logger.info(
        "Paced %d atoms: %.1fs estimated for %.1fs target",
        result.atom_count, result.estimated_total_seconds, result.target_duration_seconds,
    )
    return result


# ---------------------------------------------------------------------------
# Endpoints: Pacing
# ---------------------------------------------------------------------------


@app.post(
    "/pacing",
    response_model=PacingResponse,
    tags=["pacing"],
    summary="Pace a script and return full timing metadata",
    description=(
        "Splits the script at punctuation, estimates speech time, and "
        "distributes the remaining silence as pause directives. Returns the "
        "markup together with the speech estimate, silence budget and the "
        "per-atom pause plan."
    ),
    responses={
        500: {"model": ErrorResponse, "description": "Server configuration is invalid"},
    },
)
def create_pacing(request: PacingRequest) -> PacingResponse:
    result = _run(request)
    return PacingResponse(**result.to_dict())


@app.post(
    "/pacing/markup",
    response_model=MarkupResponse,
    tags=["pacing"],
    summary="Pace a script and return only the markup",
    responses={
        500: {"model": ErrorResponse, "description": "Server configuration is invalid"},
    },
)
def create_markup(request: PacingRequest) -> MarkupResponse:
    result = _run(request)
    return MarkupResponse(markup=result.markup)


@app.get(
    "/target-words",
    response_model=TargetWordsResponse,
    tags=["pacing"],
    summary="Word count to request for a script of a given duration",
    description=(
        "Returns round(minutes * words_per_minute). Use it to size the "
        "request to a script generator before pacing."
    ),
    responses={
        500: {"model": ErrorResponse, "description": "Server configuration is invalid"},
    },
)
async def get_target_words(
    duration_seconds: float = Query(..., ge=0, description="Script duration in seconds."),
    words_per_minute: Optional[float] = Query(
        default=None, gt=0,
        description="Script density. Defaults to the server configuration (70).",
    ),
) -> TargetWordsResponse:
    if words_per_minute is None:
        try:
            words_per_minute = load_words_per_minute()
        except ValueError as exc:
            raise HTTPException(status_code=500, detail=str(exc))
    return TargetWordsResponse(
        duration_seconds=duration_seconds,
        words_per_minute=words_per_minute,
        target_words=target_word_count(duration_seconds, words_per_minute),
    )


# ---------------------------------------------------------------------------
# Endpoints: Formats
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available output formats",
)
async def list_formats() -> List[FormatInfo]:
    # An empty run is enough to read each formatter's suffix and media type.
    sample = compute_pacing("", 0.0)
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        outputs = formatter.format(sample)
        result.append(FormatInfo(
            key=key,
            name=formatter.name,
            suffix=outputs[0].suffix if outputs else "",
            media_type=outputs[0].media_type if outputs else "",
        ))
    return result


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the meditation-pacer-api console script."""
    import uvicorn
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=8000)
