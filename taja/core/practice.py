"""Key routing between the shell, the Hangul composer and the typing engine."""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from taja.core.composer import HangulComposer
from taja.core.engine import RenderCharacter, TypingEngine, TypingResults
from taja.core.hangul import is_hangul
from taja.core.settings import PracticeSettings

logger = logging.getLogger(__name__)


class PassageSource(Protocol):
    def next_passage(self) -> List[str]: ...


class PracticeController:
    """Drives one practice run from plain characters.

    The shell translates its key events into :meth:`type_key`,
    :meth:`backspace` and :meth:`submit` and renders what comes back. When
    the next target character is Hangul, Latin keys are composed into
    syllable blocks before they reach the engine.
    """

    def __init__(
        self,
        engine: TypingEngine,
        composer: HangulComposer,
        passages: PassageSource,
        settings: Optional[PracticeSettings] = None,
    ) -> None:
        self._engine = engine
        self._composer = composer
        self._passages = passages
        self._settings = settings or PracticeSettings()

    @property
    def engine(self) -> TypingEngine:
        return self._engine

    @property
    def composition_text(self) -> str:
        return self._composer.composition_text

    @property
    def is_result_screen(self) -> bool:
        return self._engine.is_passage_complete

    def load_next_passage(self) -> None:
        self._composer.reset()
        self._engine.load_passage(self._passages.next_passage())

    def type_key(self, key: str) -> bool:
        """Handle one key, given as a single character.

        Returns False when the key was ignored or dropped: strings that are
        not exactly one character long, and keys past the end of a full line.
        """
        if len(key) != 1 or self._engine.is_passage_complete:
            return False
        self._engine.ensure_timing_started()

        if key == " " and self._settings.space_submits_line:
            self._commit(self._composer.flush())
            if self._engine.can_advance_line():
                return self._advance()
            return self._engine.try_apply_text(key)

        if self._composer.is_composing and self._block_ends_hangul_run():
            self._commit(self._composer.flush())

        if self._line_is_full():
            self._composer.reset()
            return False

        if self._routes_through_composer(key):
            return self._commit(self._composer.process_key(key))
        return self._engine.try_apply_text(key)

    def backspace(self) -> bool:
        if self._composer.handle_backspace():
            return True
        return self._engine.handle_backspace()

    def submit(self) -> bool:
        """Submit the line, or start the next passage from the result screen."""
        if self._engine.is_passage_complete:
            self.load_next_passage()
            return True
        self._commit(self._composer.flush())
        if not self._engine.can_advance_line():
            return False
        return self._advance()

    def render_line(self) -> List[RenderCharacter]:
        return self._engine.build_render_line()

    def results(self) -> TypingResults:
        return self._engine.calculate_results()

    def summary(self) -> str:
        return self.results().summary()

    def _routes_through_composer(self, key: str) -> bool:
        if not self._settings.hangul_composition:
            return False
        if self._composer.is_composing:
            return True
        return self._engine.is_current_target_hangul() and self._composer.is_mappable(key)

    def _block_ends_hangul_run(self) -> bool:
        """The open block already matches its target and no Hangul follows it."""
        line = self._engine.current_line
        pos = self._engine.current_input_length
        if pos >= len(line) or self._composer.composition_text != line[pos]:
            return False
        return pos + 1 >= len(line) or not is_hangul(line[pos + 1])

    def _line_is_full(self) -> bool:
        return self._engine.current_input_length >= len(self._engine.current_line)

    def _commit(self, text: str) -> bool:
        """Apply committed text; False if any character was dropped."""
        applied = [self._engine.try_apply_text(ch) for ch in text]
        return all(applied)

    def _advance(self) -> bool:
        advanced = self._engine.advance_line()
        if advanced:
            self._composer.reset()
            if self._engine.is_passage_complete:
                logger.info("Passage finished: %s", self.summary())
        return advanced
