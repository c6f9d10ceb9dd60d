"""Split meditation script text into punctuation-delimited speech atoms.

WHY: Silence is distributed per pause opportunity, and the pause
opportunities in a spoken script are its punctuation marks. The pacer
needs the text cut at those marks, with each span tagged by how long a
pause its punctuation calls for.

HOW: A single left-to-right regex pass collects runs of non-punctuation
characters followed by a (possibly empty) run of punctuation drawn from
``, . ? ! \\n``. Each pair becomes one candidate atom; the punctuation run
is classified by precedence and the candidate is kept only if its trimmed
text is non-empty.

RULES:
- Only four punctuation classes exist; no other sentence segmentation
- A mixed run is classified PARAGRAPH > SENTENCE_END > COMMA > NONE
- Literal punctuation kept per class: "\\n" for a paragraph, the first
  character of the run for a sentence end, "," for a comma, "" for none
- Candidates with empty trimmed text are dropped with their punctuation
- Whitespace is Python's Unicode whitespace (str.strip / str.split)
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from meditation_pacer.core.ir import DEFAULT_CONFIG, PacingConfig, PunctuationClass, SpeechAtom

ATOM_RE = re.compile(r"([^,.?!\n]+)([,.?!\n]*)")

_CLASS_BY_CHAR = {
    ",": PunctuationClass.COMMA,
    ".": PunctuationClass.SENTENCE_END,
    "?": PunctuationClass.SENTENCE_END,
    "!": PunctuationClass.SENTENCE_END,
    "\n": PunctuationClass.PARAGRAPH,
}

# Highest priority first.
_PRECEDENCE = (
    PunctuationClass.PARAGRAPH,
    PunctuationClass.SENTENCE_END,
    PunctuationClass.COMMA,
)


def count_words(text: str) -> int:
    """Number of whitespace-delimited tokens in text."""
    return len(text.split())


def count_chars(text: str) -> int:
    """Number of non-whitespace characters in text."""
    return sum(1 for c in text if not c.isspace())


def classify_punctuation(run: str) -> Tuple[PunctuationClass, str]:
    """Classify a trailing punctuation run and pick its literal form.

    Args:
        run: Zero or more characters from ``, . ? ! \\n``.

    Returns:
        (class, literal) where literal is what the markup reproduces:
        "\\n", the run's first character, "," or "".
    """
    present = {_CLASS_BY_CHAR[c] for c in run if c in _CLASS_BY_CHAR}
    for punctuation in _PRECEDENCE:
        if punctuation not in present:
            continue
        if punctuation is PunctuationClass.PARAGRAPH:
            return punctuation, "\n"
        if punctuation is PunctuationClass.SENTENCE_END:
            return punctuation, run[0]
        return punctuation, ","
    return PunctuationClass.NONE, ""


def tokenize(text: str, config: Optional[PacingConfig] = None) -> List[SpeechAtom]:
    """Split text into an ordered list of speech atoms.

    WHY: This is the first half of the pacing pipeline; the pacer consumes
    the atoms read-only.

    HOW: Iterates ATOM_RE matches, trims each content span, classifies the
    punctuation run, and builds a SpeechAtom whose weight comes from
    ``config``.

    RULES:
    - Empty input yields an empty list
    - Text without punctuation yields one atom of class NONE
    - Leading punctuation, doubled punctuation and whitespace-only spans
      never produce atoms

    Args:
        text: Complete script text.
        config: Supplies punctuation weights. Default: DEFAULT_CONFIG.

    Returns:
        Atoms in text order.
    """
    active = config if config is not None else DEFAULT_CONFIG
    atoms: List[SpeechAtom] = []

    for match in ATOM_RE.finditer(text):
        content = match.group(1).strip()
        if not content:
            continue
        punctuation, literal = classify_punctuation(match.group(2))
        atoms.append(SpeechAtom(content, punctuation, literal, active))

    return atoms


def find_sentence_boundaries(atoms: List[SpeechAtom]) -> List[int]:
    """Indices of atoms that end a sentence or a paragraph.

    Used by callers that add silence after rendering instead of through
    markup, at the points where a listener expects a full stop.
    """
    return [
        i for i, atom in enumerate(atoms)
        if atom.punctuation in (PunctuationClass.SENTENCE_END, PunctuationClass.PARAGRAPH)
    ]
