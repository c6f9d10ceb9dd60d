"""Command-line interface for the meditation pacer.

WHY: Script writers and batch jobs need to pace a text file from the
terminal and get the markup, a clean script and a timing report without
writing Python. They also need to know how many words to ask a text
generator for before a script exists.

HOW: Uses argparse to accept a script path (or ``-`` for stdin), a target
duration, optional pacing overrides and output options. Configuration
starts from load_pacing_config() (PACING_* variables and .env) and CLI
flags override individual fields. Each selected formatter's output is
saved next to the script (or to --output-dir). ``--words-for`` answers
the sizing question and exits.

RULES:
- Exactly one of --duration (seconds) or --minutes is required for pacing
- --formats: comma-separated formatter keys (default: all registered)
- --stdout prints the markup and writes no files
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-paced-2.ssml)
- Status output goes to stderr; only markup or word counts go to stdout
- Exit codes: 0 = success, 1 = error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from meditation_pacer import compute_pacing, target_word_count
from meditation_pacer.config import load_pacing_config, load_words_per_minute
from meditation_pacer.core.ir import PacingConfig, PacingResult
from meditation_pacer.formatters import FORMATTERS
from meditation_pacer.formatters.base import FormatterOutput

logger = logging.getLogger(__name__)

STDIN_STEM = "script"

# CLI flag dest -> PacingConfig field
_CONFIG_OVERRIDES = {
    "chars_per_second": "chars_per_second",
    "safety_buffer": "silence_safety_buffer",
    "max_break": "max_break_seconds",
    "min_break": "min_break_seconds",
    "weight_comma": "weight_comma",
    "weight_sentence": "weight_sentence",
    "weight_paragraph": "weight_paragraph",
}


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding a numeric suffix on conflict.

    WHY: Re-pacing the same script with a different duration must not
    overwrite earlier output.

    HOW: Try {stem}{suffix}; on conflict insert -2, -3, ... before the
    suffix's extension until a free name is found.
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    if isinstance(output.content, bytes):
        path.write_bytes(output.content)
    else:
        path.write_text(output.content, encoding="utf-8")
    return path


def _build_config(args: argparse.Namespace) -> PacingConfig:
    config = load_pacing_config()
    overrides = {}
    for dest, field_name in _CONFIG_OVERRIDES.items():
        value = getattr(args, dest)
        if value is not None:
            overrides[field_name] = value
    if overrides:
        config = config.replace(**overrides)
    return config


def _parse_formats(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(FORMATTERS.keys())
    keys = [f.strip() for f in raw.split(",") if f.strip()]
    for key in keys:
        if key not in FORMATTERS:
            _fail("Unknown format '{}'. Available formats: {}".format(
                key, ", ".join(sorted(FORMATTERS.keys()))
            ))
    return keys


def _read_script(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        _fail("File not found: {}".format(path))
    return path.read_text(encoding="utf-8")


def _summarize(result: PacingResult) -> None:
    _status("Paced {} atoms ({} words, {} chars)".format(
        result.atom_count, result.total_words, result.total_chars,
    ))
    _status("  speech {:.1f}s + silence {:.1f}s = {:.1f}s (target {:.1f}s)".format(
        result.estimated_speech_seconds,
        result.total_silence_added,
        result.estimated_total_seconds,
        result.target_duration_seconds,
    ))
    if result.estimated_speech_seconds > result.target_duration_seconds:
        _status("  warning: speech alone exceeds the target; no pauses were added")


def _run_words_for(args: argparse.Namespace) -> None:
    try:
        wpm = args.wpm if args.wpm is not None else load_words_per_minute()
    except ValueError as e:
        _fail(str(e))
    print(target_word_count(args.words_for, wpm))


def _run_pacing(args: argparse.Namespace) -> None:
    if args.duration is None and args.minutes is None:
        _fail("A target duration is required (--duration SECONDS or --minutes M).")
    target = args.duration if args.duration is not None else args.minutes * 60.0

    try:
        config = _build_config(args)
    except ValueError as e:
        _fail(str(e))

    format_keys = _parse_formats(args.formats)
    text = _read_script(args.script)

    result = compute_pacing(text, target, config)
    _summarize(result)

    if args.stdout:
        print(result.markup)
        return

    if args.script == "-":
        stem = STDIN_STEM
        default_dir = Path.cwd()
    else:
        script_path = Path(args.script).resolve()
        stem = script_path.stem
        default_dir = script_path.parent

    output_dir = Path(args.output_dir).resolve() if args.output_dir else default_dir
    if not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    saved: List[Path] = []
    for key in format_keys:
        formatter = FORMATTERS[key]()
        for output in formatter.format(result):
            saved.append(_save_output(output, stem, output_dir))
            logger.debug("Wrote %s output to %s", key, saved[-1])

    _status("Saved {} file(s) to {}".format(len(saved), output_dir))
    for path in saved:
        _status("  {}".format(path.name))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separate from main() so tests can inspect the parser.
    """
    parser = argparse.ArgumentParser(
        prog="meditation_pacer",
        description="Fit a meditation script to a target duration by inserting "
                    "pause directives for a TTS engine.",
    )

    parser.add_argument(
        "script",
        nargs="?",
        default=None,
        help="Path to the script text file, or '-' to read from stdin.",
    )

    duration = parser.add_mutually_exclusive_group()
    duration.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Target duration in seconds.",
    )
    duration.add_argument(
        "--minutes",
        type=float,
        default=None,
        help="Target duration in minutes.",
    )

    parser.add_argument(
        "--words-for",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Print how many words to request for a script of this duration, then exit.",
    )
    parser.add_argument(
        "--wpm",
        type=float,
        default=None,
        help="Words per minute for --words-for (default: PACING_WORDS_PER_MINUTE or 70).",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as the script).",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the markup to stdout instead of writing files.",
    )

    tuning = parser.add_argument_group("pacing overrides")
    tuning.add_argument("--chars-per-second", type=float, default=None,
                        help="Speech rate in non-whitespace characters per second.")
    tuning.add_argument("--safety-buffer", type=float, default=None,
                        help="Multiplier applied to the silence budget.")
    tuning.add_argument("--max-break", type=float, default=None,
                        help="Longest single pause directive in seconds.")
    tuning.add_argument("--min-break", type=float, default=None,
                        help="Shortest pause worth emitting in seconds.")
    tuning.add_argument("--weight-comma", type=int, default=None)
    tuning.add_argument("--weight-sentence", type=int, default=None)
    tuning.add_argument("--weight-paragraph", type=int, default=None)

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m meditation_pacer``.

    argv=None means use sys.argv; an explicit list is for testing.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.words_for is not None:
        _run_words_for(args)
        return

    if args.script is None:
        parser.error("a script path (or '-') is required unless --words-for is given")

    _run_pacing(args)


if __name__ == "__main__":
    main()
