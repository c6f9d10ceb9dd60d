"""JSON pacing report formatter, validated against a JSON schema.

WHY: Callers log and audit pacing runs: how long the speech was estimated
to take, how much silence was budgeted, and whether the script overran
the requested duration. A machine-readable report with a fixed schema
makes that metadata safe to ingest downstream.

HOW: Serializes PacingResult.to_dict(), adds the report version, the
deviation from the target and an overrun flag, and validates the result
with jsonschema before returning.

RULES:
- Schema: meditation_pacer/schemas/pacing_report.schema.json (version 1.0.0)
- deviation_seconds = estimated_total_seconds - target_duration_seconds
- overrun is True when estimated speech alone exceeds the target
- Non-finite durations (an infinite target) are written as null, so the
  file is always strict JSON
- Validation is mandatory; raises jsonschema.ValidationError on failure
- Output suffix: "-pacing.json"
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

from meditation_pacer.core.ir import PacingResult
from meditation_pacer.formatters.base import BaseFormatter, FormatterOutput

REPORT_VERSION = "1.0.0"

_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "pacing_report.schema.json"

_CACHED_SCHEMA: Optional[Dict[str, Any]] = None

# Float fields that an infinite or NaN target can push out of range.
_NULLABLE_FIELDS = (
    "estimated_speech_seconds",
    "raw_silence_budget",
    "final_silence_budget",
    "total_silence_added",
    "target_duration_seconds",
    "estimated_total_seconds",
    "deviation_seconds",
)


def _get_schema() -> Dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def _finite_or_none(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def build_report(result: PacingResult) -> Dict[str, Any]:
    """Build the report dict for a pacing run (not yet validated)."""
    report: Dict[str, Any] = {"version": REPORT_VERSION}
    report.update(result.to_dict())
    report["deviation_seconds"] = result.estimated_total_seconds - result.target_duration_seconds
    report["overrun"] = result.estimated_speech_seconds > result.target_duration_seconds
    for key in _NULLABLE_FIELDS:
        report[key] = _finite_or_none(report[key])
    return report


class PacingReportFormatter(BaseFormatter):
    """Formatter that produces the JSON timing report."""

    @property
    def name(self) -> str:
        return "Pacing Report JSON"

    def format(self, result: PacingResult) -> List[FormatterOutput]:
        """Build, validate and serialize the report.

        Raises:
            jsonschema.ValidationError: If the report does not conform to
                the pacing report schema.
        """
        report = build_report(result)
        jsonschema.validate(instance=report, schema=_get_schema())
        content = json.dumps(report, indent=2, ensure_ascii=False, allow_nan=False)
        return [
            FormatterOutput(
                suffix="-pacing.json",
                content=content,
                media_type="application/json",
            )
        ]
