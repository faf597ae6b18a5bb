"""Tests for taja.core.practice – routing keys between composer and engine."""

from __future__ import annotations

from typing import List, Optional

import pytest

from taja.core.composer import HangulComposer
from taja.core.engine import LineCharState, TypingEngine
from taja.core.practice import PracticeController
from taja.core.settings import PracticeSettings


class FixedPassages:
    """Passage source returning the given passages in order, then repeating the last."""

    def __init__(self, *passages: List[str]) -> None:
        self._passages = list(passages)
        self.calls = 0

    def next_passage(self) -> List[str]:
        passage = self._passages[min(self.calls, len(self._passages) - 1)]
        self.calls += 1
        return list(passage)


def _controller(*passages: List[str], settings: Optional[PracticeSettings] = None) -> PracticeController:
    controller = PracticeController(TypingEngine(), HangulComposer(), FixedPassages(*passages), settings)
    controller.load_next_passage()
    return controller


def _keys(controller: PracticeController, keys: str) -> None:
    for k in keys:
        controller.type_key(k)


# ===========================================================================
# Hangul routing
# ===========================================================================

class TestHangulRouting:
    def test_word_typed_through_composer(self):
        c = _controller(["한글"])
        _keys(c, "gksr")
        assert c.engine.typed_text == "한"
        assert c.composition_text == "ㄱ"
        _keys(c, "mf")
        assert c.composition_text == "글"
        assert c.engine.typed_text == "한"

    def test_submit_flushes_composition(self):
        c = _controller(["한글"])
        _keys(c, "gksrmf")
        assert c.submit() is True
        assert c.is_result_screen
        assert c.results().accuracy == 100.0

    def test_timing_starts_on_absorbed_key(self):
        c = _controller(["가"])
        c.type_key("r")
        assert c.engine.current_input_length == 0
        assert c.engine.has_started

    def test_ascii_target_bypasses_composer(self):
        c = _controller(["cat"])
        _keys(c, "cat")
        assert c.engine.typed_text == "cat"
        assert c.composition_text == ""

    def test_mixed_line(self):
        c = _controller(["a가"])
        _keys(c, "ark")
        assert c.engine.typed_text == "a"
        assert c.composition_text == "가"
        assert c.submit() is True
        assert c.is_result_screen

    def test_latin_after_hangul(self):
        c = _controller(["가a"])
        _keys(c, "rka")
        assert c.engine.typed_text == "가a"
        assert c.composition_text == ""
        assert c.submit() is True
        assert c.results().accuracy == 100.0

    def test_latin_after_hangul_with_final(self):
        c = _controller(["각a"])
        _keys(c, "rkr")
        assert c.composition_text == "각"
        c.type_key("a")
        assert c.engine.typed_text == "각a"

    def test_unfinished_block_keeps_composing(self):
        # 가 does not match 각 yet, so the next consonant becomes its final
        c = _controller(["각a"])
        _keys(c, "rk")
        c.type_key("r")
        assert c.engine.typed_text == ""
        assert c.composition_text == "각"

    def test_punctuation_flushes_block(self):
        c = _controller(["가."])
        _keys(c, "rk.")
        assert c.engine.typed_text == "가."
        assert c.composition_text == ""

    def test_composition_disabled(self):
        c = _controller(["가"], settings=PracticeSettings(hangul_composition=False))
        c.type_key("r")
        assert c.engine.typed_text == "r"
        states = [rc.state for rc in c.render_line()]
        assert states == [LineCharState.INCORRECT]


# ===========================================================================
# Space and submission
# ===========================================================================

class TestSpace:
    def test_space_inside_line_is_typed(self):
        c = _controller(["가 나"])
        _keys(c, "rk ")
        assert c.engine.typed_text == "가 "
        _keys(c, "sk")
        assert c.composition_text == "나"

    def test_space_on_full_line_advances(self):
        c = _controller(["가 나", "cat"])
        _keys(c, "rk sk ")
        assert c.engine.current_line == "cat"
        assert c.engine.current_line_index == 1
        assert c.composition_text == ""

    def test_space_advances_ascii_line(self):
        c = _controller(["ab", "cd"])
        _keys(c, "ab ")
        assert c.engine.current_line == "cd"

    def test_space_submission_disabled(self):
        c = _controller(["ab", "cd"], settings=PracticeSettings(space_submits_line=False))
        _keys(c, "ab")
        assert c.type_key(" ") is False
        assert c.engine.current_line == "ab"
        assert c.submit() is True
        assert c.engine.current_line == "cd"

    def test_keys_past_full_hangul_line_are_dropped(self):
        c = _controller(["가"])
        _keys(c, "rk")
        assert c.type_key("r") is False
        assert c.engine.typed_text == "가"
        assert c.composition_text == ""
        assert c.type_key("k") is False
        assert c.composition_text == ""
        assert c.submit() is True

    def test_keys_past_full_mixed_line_are_dropped(self):
        c = _controller(["가a"])
        _keys(c, "rka")
        assert c.type_key("r") is False
        assert c.composition_text == ""
        assert c.engine.typed_text == "가a"

    def test_multi_character_key_rejected(self):
        c = _controller(["ab"])
        assert c.type_key("ab") is False
        assert c.engine.current_input_length == 0
        assert not c.engine.has_started

    def test_submit_partial_line(self):
        c = _controller(["abc"])
        _keys(c, "ab")
        assert c.submit() is False
        assert c.engine.current_line_index == 0


# ===========================================================================
# Backspace
# ===========================================================================

class TestBackspace:
    def test_composer_first(self):
        c = _controller(["가나"])
        _keys(c, "rk")
        assert c.backspace() is True
        assert c.composition_text == "ㄱ"
        assert c.backspace() is True
        assert c.composition_text == ""
        assert c.backspace() is False

    def test_falls_back_to_engine(self):
        c = _controller(["가나"])
        _keys(c, "rksk")
        assert c.engine.typed_text == "가"
        assert c.composition_text == "나"
        c.backspace()
        c.backspace()
        assert c.composition_text == ""
        assert c.engine.typed_text == "가"
        assert c.backspace() is True
        assert c.engine.typed_text == ""

    def test_plain_backspace(self):
        c = _controller(["abc"])
        _keys(c, "ab")
        assert c.backspace() is True
        assert c.engine.typed_text == "a"


# ===========================================================================
# Result screen
# ===========================================================================

class TestResultScreen:
    def test_keys_ignored_when_complete(self):
        c = _controller(["a"])
        c.type_key("a")
        c.submit()
        assert c.is_result_screen
        assert c.type_key("b") is False

    def test_summary_format(self):
        c = _controller(["a"])
        c.type_key("a")
        c.submit()
        assert c.summary().startswith("CPM ")
        assert c.summary().endswith("ACC 100.0%")

    def test_submit_on_result_screen_loads_next(self):
        c = _controller(["a"], ["next line"])
        c.type_key("a")
        c.submit()
        assert c.submit() is True
        assert not c.is_result_screen
        assert c.engine.current_line == "next line"
        assert c.results() == (0, 0, 100)

    def test_empty_key_ignored(self):
        c = _controller(["a"])
        assert c.type_key("") is False
        assert not c.engine.has_started

    @pytest.mark.parametrize("keys", ["cax", "cat"])
    def test_results_after_passage(self, keys):
        c = _controller(["cat"])
        _keys(c, keys)
        c.submit()
        expected = 100.0 if keys == "cat" else pytest.approx(200.0 / 3.0)
        assert c.results().accuracy == expected
