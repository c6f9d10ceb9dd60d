"""Paced markup formatter: the string handed to the TTS engine.

WHY: The markup is the product the rest of the pipeline exists for. Saving
it as its own file lets it be fed to a TTS client unchanged.

HOW: Writes PacingResult.markup verbatim, with a single trailing newline
for POSIX-friendly files.

RULES:
- Content is the markup exactly, plus one "\\n" when non-empty
- Output suffix: "-paced.ssml"
- Media type: "application/ssml+xml"
"""

from __future__ import annotations

from typing import List

from meditation_pacer.core.ir import PacingResult
from meditation_pacer.formatters.base import BaseFormatter, FormatterOutput


class MarkupFormatter(BaseFormatter):
    """Formatter that writes the paced markup string."""

    @property
    def name(self) -> str:
        return "Paced Markup"

    def format(self, result: PacingResult) -> List[FormatterOutput]:
        content = result.markup
        if content:
            content += "\n"
        return [
            FormatterOutput(
                suffix="-paced.ssml",
                content=content,
                media_type="application/ssml+xml",
            )
        ]
