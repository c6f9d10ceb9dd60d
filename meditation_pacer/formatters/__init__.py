"""Output formatter registry.

WHY: The CLI and the HTTP server look formatters up by key. A central
dict makes adding a format a one-line change.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["markup"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and API responses)
- Values are BaseFormatter subclasses (not instances)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from meditation_pacer.formatters.markup import MarkupFormatter
from meditation_pacer.formatters.pacing_report import PacingReportFormatter
from meditation_pacer.formatters.plain_text import PlainTextFormatter

if TYPE_CHECKING:
    from meditation_pacer.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "markup": MarkupFormatter,
    "plain_text": PlainTextFormatter,
    "pacing_report": PacingReportFormatter,
}
