"""Plain text formatter: the paced script with pause directives removed.

WHY: Reviewers proofread the script as a listener will hear it, without
markup noise. The text is also what re-tokenizes to the original atoms,
which makes it a convenient check that pacing never alters the words.

HOW: Strips every break directive from the markup, then puts each
paragraph on its own line and trims trailing spaces.

RULES:
- Words and punctuation are never modified
- Paragraph atoms end a line; no line carries trailing whitespace
- Output suffix: "-script.txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from typing import List

from meditation_pacer.core.ir import PacingResult
from meditation_pacer.core.pacer import strip_break_directives
from meditation_pacer.formatters.base import BaseFormatter, FormatterOutput


def _tidy_lines(text: str) -> str:
    lines = [line.strip() for line in text.split("\n")]
    return "\n".join(lines).strip()


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces the spoken script as plain text."""

    @property
    def name(self) -> str:
        return "Plain Script"

    def format(self, result: PacingResult) -> List[FormatterOutput]:
        """Strip directives from the markup and tidy line ends.

        Args:
            result: A completed pacing run.

        Returns:
            A single-element list containing the plain text output.
        """
        content = _tidy_lines(strip_break_directives(result.markup))
        if content:
            content += "\n"
        return [
            FormatterOutput(
                suffix="-script.txt",
                content=content,
                media_type="text/plain",
            )
        ]
