"""Abstract base formatter and output container.

WHY: A pacing run is consumed in several shapes: the markup sent to the
TTS engine, the bare script for proofreading, and a JSON timing report
for logging. A shared base class lets the CLI and the HTTP server treat
them all generically.

HOW: BaseFormatter is an ABC with a ``name`` property and a ``format()``
method taking a PacingResult. FormatterOutput bundles a file suffix with
its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` and ``format()``
- ``format()`` returns a list, usually of one item
- ``suffix`` starts with a hyphen, e.g. ``"-paced.ssml"``
- The caller prepends the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from meditation_pacer.core.ir import PacingResult


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: Appended to the source stem, e.g. ``"-paced.ssml"`` ->
                ``"evening-paced.ssml"``.
        content: The file content.
        media_type: MIME type for the content.
    """

    suffix: str
    content: str | bytes
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all pacing output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Paced Markup'."""

    @abstractmethod
    def format(self, result: PacingResult) -> list[FormatterOutput]:
        """Convert a PacingResult into one or more output files."""
