"""Unit tests for the pacer (atoms + target duration -> PacingResult).

WHY: The pacer decides every second of silence in the rendered audio.
Errors here show up as meditations that end early, run long, or pause
after the final word, and they are invisible until someone listens.

HOW: Tests build atoms with tokenize() (or by hand for edge cases), run
pace() / format_break_tags() / distribute_silence(), and compare timing
fields with values worked out from the formulas:
  speech = chars / cps
  raw    = max(0, target - speech)
  final  = raw * buffer
  pause  = weight * final / (sum of weights of all but the last atom)

RULES:
- Float comparisons use pytest.approx
- Degenerate configurations must never raise
"""

import logging

import pytest

from meditation_pacer.config import MAX_BREAKS_PER_PAUSE
from meditation_pacer.core.ir import PacingConfig, PunctuationClass, SpeechAtom
from meditation_pacer.core.pacer import (
    distribute_silence,
    estimate_speech_seconds,
    format_break_tags,
    is_renderable,
    pace,
    strip_break_directives,
)
from meditation_pacer.core.tokenizer import tokenize

OVERRUN_SCRIPT = (
    "This is a very long meditation script that contains many many words and "
    "will definitely take longer than five seconds to speak aloud."
)


def _pace(text, target, config=None):
    return pace(tokenize(text, config), target, config)


class TestFormatBreakTags:
    """format_break_tags() splitting at the per-directive maximum."""

    def test_two_seconds_single_tag(self):
        assert format_break_tags(2.0) == '<break time="2.0s"/>'

    def test_five_seconds_two_tags(self):
        assert format_break_tags(5.0) == '<break time="3.0s"/><break time="2.0s"/>'

    def test_nine_seconds_three_tags(self):
        assert format_break_tags(9.0) == '<break time="3.0s"/>' * 3

    def test_remainder_below_minimum_dropped(self):
        assert format_break_tags(3.05) == '<break time="3.0s"/>'

    def test_below_minimum_renders_nothing(self):
        assert format_break_tags(0.05) == ""

    def test_one_decimal_place(self):
        assert format_break_tags(1.26) == '<break time="1.3s"/>'

    def test_custom_maximum(self):
        config = PacingConfig(max_break_seconds=2.0)
        assert format_break_tags(5.0, config) == '<break time="2.0s"/>' * 2 + '<break time="1.0s"/>'

    def test_non_positive_maximum_renders_nothing(self):
        assert format_break_tags(5.0, PacingConfig(max_break_seconds=0.0)) == ""

    def test_negative_minimum_terminates(self):
        config = PacingConfig(min_break_seconds=-1.0)
        assert format_break_tags(4.0, config) == '<break time="3.0s"/><break time="1.0s"/>'

    def test_infinite_pause_renders_nothing(self):
        assert format_break_tags(float("inf")) == ""

    def test_directive_count_is_capped(self):
        at_cap = format_break_tags(3.0 * MAX_BREAKS_PER_PAUSE)
        assert at_cap.count("<break") == MAX_BREAKS_PER_PAUSE
        assert format_break_tags(3.0 * MAX_BREAKS_PER_PAUSE + 3.0) == ""

    def test_huge_finite_pause_renders_nothing(self):
        # 3.0 is below the float spacing at 1e17, so subtracting it changes nothing
        assert format_break_tags(1e17) == ""

    def test_tiny_maximum_renders_nothing(self):
        assert format_break_tags(60.0, PacingConfig(max_break_seconds=1e-6)) == ""

    def test_is_renderable(self):
        assert is_renderable(9.0)
        assert not is_renderable(1e17)
        assert not is_renderable(float("nan"))
        assert not is_renderable(9.0, PacingConfig(max_break_seconds=0.0))
        assert not is_renderable(9.0, PacingConfig(max_break_seconds=1e-300))


class TestMeasurement:
    """Character and word measurement feeding the speech estimate."""

    def test_character_based_estimation(self, welcome_script):
        result = _pace(welcome_script, 60.0)
        assert result.total_chars == 22
        assert result.total_words == 5
        assert result.atom_count == 2
        assert result.estimated_speech_seconds == pytest.approx(22 / 12)

    def test_estimate_speech_seconds_helper(self, welcome_script):
        # raw text, so the two full stops count too
        assert estimate_speech_seconds(welcome_script) == pytest.approx(24 / 12)

    def test_zero_rate_estimates_zero(self):
        config = PacingConfig(chars_per_second=0.0)
        assert estimate_speech_seconds("Breathe.", config) == 0.0
        result = _pace("Breathe in. Breathe out.", 10.0, config)
        assert result.estimated_speech_seconds == 0.0
        assert result.raw_silence_budget == 10.0

    def test_negative_rate_estimates_zero(self):
        result = _pace("Breathe in. Breathe out.", 10.0, PacingConfig(chars_per_second=-5.0))
        assert result.estimated_speech_seconds == 0.0


class TestSilenceBudget:
    """Raw and buffered silence budgets."""

    def test_safety_buffer_applied(self, welcome_script):
        result = _pace(welcome_script, 60.0)
        expected_raw = 60.0 - 22 / 12
        assert result.raw_silence_budget == pytest.approx(expected_raw)
        assert result.final_silence_budget == result.raw_silence_budget * 1.1

    def test_custom_buffer(self, welcome_script):
        result = _pace(welcome_script, 60.0, PacingConfig(silence_safety_buffer=1.5))
        assert result.final_silence_budget == result.raw_silence_budget * 1.5

    def test_no_negative_silence_on_overrun(self):
        result = _pace(OVERRUN_SCRIPT, 5.0)
        assert result.raw_silence_budget == 0.0
        assert result.final_silence_budget == 0.0
        assert result.total_silence_added == 0.0
        assert "<break" not in result.markup
        assert result.markup == OVERRUN_SCRIPT
        assert result.estimated_total_seconds == result.estimated_speech_seconds

    def test_zero_target(self, welcome_script):
        result = _pace(welcome_script, 0.0)
        assert result.raw_silence_budget == 0.0
        assert result.markup == "Welcome. Take a deep breath."

    def test_negative_target(self, welcome_script):
        result = _pace(welcome_script, -30.0)
        assert result.raw_silence_budget == 0.0
        assert result.total_silence_added == 0.0
        assert result.target_duration_seconds == -30.0


class TestDistribution:
    """Weighted distribution of the final budget across atoms."""

    def test_welcome_markup(self, welcome_script):
        result = _pace(welcome_script, 60.0)
        # final budget 63.98s -> 21 full 3.0s directives plus a 1.0s remainder
        expected = (
            "Welcome."
            + '<break time="3.0s"/>' * 21
            + '<break time="1.0s"/>'
            + " Take a deep breath."
        )
        assert result.markup == expected
        assert result.total_silence_added == pytest.approx(result.final_silence_budget)

    def test_shares_follow_weights(self):
        config = PacingConfig(silence_safety_buffer=1.0)
        result = _pace("One, two. Three\nfour", 100.0, config)
        shares = [p.silence_after for p in result.pauses]
        # 15 chars -> 1.25s speech, 98.75s spread over 1 + 3 + 5 units
        unit = 98.75 / 9
        assert shares == pytest.approx([unit, 3 * unit, 5 * unit, 0.0])
        assert result.total_silence_added == pytest.approx(98.75)

    def test_pauses_sum_to_total(self, calibration_script):
        result = _pace(calibration_script, 60.0)
        assert sum(p.silence_after for p in result.pauses) == result.total_silence_added

    def test_last_atom_gets_no_pause(self, calibration_script):
        result = _pace(calibration_script, 60.0)
        assert result.pauses[-1].silence_after == 0.0

    def test_single_atom_has_no_pause(self):
        result = _pace("Breathe.", 60.0)
        assert result.atom_count == 1
        assert result.total_silence_added == 0.0
        assert result.markup == "Breathe."

    def test_pause_below_minimum_is_omitted(self):
        config = PacingConfig(min_break_seconds=1.0)
        result = _pace("A, b.", 1.0, config)
        assert result.markup == "A, b."
        assert result.total_silence_added == 0.0

    def test_small_pause_above_minimum_is_emitted(self):
        # 2 chars -> 0.1667s speech; (1.0 - 0.1667) * 1.1 = 0.9167s after the comma
        result = _pace("A, b.", 1.0)
        assert result.markup == 'A,<break time="0.9s"/> b.'

    def test_zero_weights_mean_no_pauses(self, calibration_script):
        config = PacingConfig(weight_comma=0, weight_sentence=0, weight_paragraph=0)
        result = _pace(calibration_script, 60.0, config)
        assert "<break" not in result.markup
        assert result.total_silence_added == 0.0

    def test_negative_buffer_means_no_pauses(self, welcome_script):
        result = _pace(welcome_script, 60.0, PacingConfig(silence_safety_buffer=-1.0))
        assert result.final_silence_budget < 0
        assert result.total_silence_added == 0.0

    def test_unrenderable_maximum_adds_nothing(self, welcome_script):
        result = _pace(welcome_script, 60.0, PacingConfig(max_break_seconds=0.0))
        assert "<break" not in result.markup
        assert result.total_silence_added == 0.0

    def test_infinite_target_adds_nothing(self, welcome_script):
        result = _pace(welcome_script, float("inf"))
        assert "<break" not in result.markup
        assert result.total_silence_added == 0.0

    def test_huge_finite_target_terminates(self, welcome_script):
        result = _pace(welcome_script, 1e17)
        assert result.markup == "Welcome. Take a deep breath."
        assert result.total_silence_added == 0.0
        assert result.raw_silence_budget == pytest.approx(1e17)

    def test_tiny_maximum_adds_nothing(self, welcome_script):
        result = _pace(welcome_script, 60.0, PacingConfig(max_break_seconds=1e-6))
        assert "<break" not in result.markup
        assert result.total_silence_added == 0.0

    def test_hour_long_pause_is_rendered(self, welcome_script):
        # (3600 - 22/12) * 1.1 = 3957.98s -> 1319 full directives plus 1.0s
        result = _pace(welcome_script, 3600.0)
        assert result.markup.count('<break time="3.0s"/>') == 1319
        assert result.markup.count("<break") == 1320

    def test_mid_text_none_atom_is_pause_free(self):
        atoms = [
            SpeechAtom("breathe", PunctuationClass.NONE),
            SpeechAtom("and rest", PunctuationClass.COMMA, ","),
            SpeechAtom("now", PunctuationClass.SENTENCE_END, "."),
        ]
        pauses = distribute_silence(atoms, 10.0)
        assert [p.silence_after for p in pauses] == pytest.approx([0.0, 10.0, 0.0])

    def test_distribute_empty(self):
        assert distribute_silence([], 10.0) == ()


class TestMarkupShape:
    """Markup layout: spacing, trailing content, directive stripping."""

    def test_no_break_after_last_atom(self):
        result = _pace("First sentence. Second sentence.", 60.0)
        assert not result.markup.rstrip().endswith("/>")
        assert result.markup.endswith("sentence.")

    def test_ends_with_text_when_no_final_punctuation(self):
        result = _pace("Breathe in, and let go", 30.0)
        assert result.markup.endswith("and let go")

    def test_empty_atoms(self):
        result = pace([], 60.0)
        assert result.markup == ""
        assert result.atom_count == 0
        assert result.raw_silence_budget == 60.0
        assert result.final_silence_budget == pytest.approx(66.0)
        assert result.total_silence_added == 0.0

    def test_single_space_between_atoms(self):
        config = PacingConfig(silence_safety_buffer=0.0)
        result = _pace("One,   two.   Three.", 60.0, config)
        assert result.markup == "One, two. Three."

    def test_paragraph_literal_kept(self, paragraph_script):
        result = _pace(paragraph_script, 0.0)
        assert result.markup == (
            "Settle into your seat, and let your hands rest\n "
            "Breathe in slowly. Breathe out\n Stay here a while."
        )

    def test_reparse_reproduces_atoms(self, calibration_script, paragraph_script):
        for script in (calibration_script, paragraph_script):
            original = tokenize(script)
            result = pace(original, 120.0)
            reparsed = tokenize(strip_break_directives(result.markup))
            assert [a.text for a in reparsed] == [a.text for a in original]
            assert [a.word_count for a in reparsed] == [a.word_count for a in original]


class TestProductionCalibration:
    """A ~310 character script lands near 26 s of speech."""

    def test_sixty_second_meditation(self, calibration_script):
        result = _pace(calibration_script, 60.0)
        assert 20.0 < result.estimated_speech_seconds < 35.0
        assert result.final_silence_budget > result.raw_silence_budget
        assert result.estimated_total_seconds >= 60.0
        assert not result.markup.endswith("/>")

    def test_every_directive_within_limit(self, calibration_script):
        result = _pace(calibration_script, 600.0)
        directives = result.markup.count("<break")
        assert directives > 0
        assert '<break time="3.1s"/>' not in result.markup


class TestLogging:
    """The pacer logs a debug summary per run."""

    def test_debug_summary(self, welcome_script, caplog):
        with caplog.at_level(logging.DEBUG, logger="meditation_pacer.core.pacer"):
            _pace(welcome_script, 60.0)
        assert "Paced 2 atoms" in caplog.text

    def test_overrun_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="meditation_pacer.core.pacer"):
            _pace(OVERRUN_SCRIPT, 5.0)
        assert "exceeds target" in caplog.text
