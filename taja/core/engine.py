from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional

from taja.core.hangul import is_hangul

logger = logging.getLogger(__name__)

PLACEHOLDER_LINE = "(empty)"

# Elapsed time is floored at one millisecond so rates never divide by zero.
_MIN_ELAPSED_MINUTES = 1.0 / 60000.0


class LineCharState(Enum):
    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True)
class RenderCharacter:
    """One target character of the active line and how it was typed."""

    character: str
    state: LineCharState


class TypingResults(NamedTuple):
    """End-of-run metrics: characters/words per minute and accuracy percent."""

    cpm: float
    wpm: float
    accuracy: float

    def summary(self) -> str:
        return f"CPM {round(self.cpm)}   WPM {round(self.wpm)}   ACC {self.accuracy:.1f}%"


@dataclass
class KeystrokeStats:
    """Live keystroke counters, updated as each character is entered.

    These are diagnostics only. Corrections made before a line is submitted
    still count here, so accuracy shown to the user comes from
    :meth:`TypingEngine.calculate_results` instead.
    """

    total_keystrokes: int = 0
    correct_keystrokes: int = 0

    def reset(self) -> None:
        self.total_keystrokes = 0
        self.correct_keystrokes = 0

    def raw_cpm(self, elapsed_minutes: float) -> float:
        if elapsed_minutes <= 0:
            return 0.0
        return self.total_keystrokes / elapsed_minutes

    def raw_wpm(self, elapsed_minutes: float) -> float:
        """Keystrokes / 5 per minute."""
        if elapsed_minutes <= 0:
            return 0.0
        return (self.total_keystrokes / 5.0) / elapsed_minutes

    def accuracy_percent(self) -> float:
        if self.total_keystrokes == 0:
            return 100.0
        return self.correct_keystrokes * 100.0 / self.total_keystrokes


def count_words(line: str) -> int:
    """Number of whitespace-delimited tokens in ``line``."""
    return len(line.split())


class TypingEngine:
    """Judges typing against a passage one line at a time.

    Timing starts lazily on the first real keystroke, so time spent looking
    at a freshly loaded passage does not lower CPM/WPM. Accuracy is computed
    when a line is submitted: a typo fixed with backspace before submission
    is not an error.
    """

    def __init__(self) -> None:
        self._lines: List[str] = []
        self._buffer: List[str] = []
        self._index = 0
        self._started_at: Optional[float] = None
        self._finished_at: Optional[float] = None
        self._stats = KeystrokeStats()
        self._submitted_chars = 0
        self._submitted_words = 0
        self._evaluated_chars = 0
        self._correct_chars = 0

    @property
    def stats(self) -> KeystrokeStats:
        return self._stats

    @property
    def current_line_index(self) -> int:
        return self._index

    @property
    def total_line_count(self) -> int:
        return len(self._lines)

    @property
    def is_passage_complete(self) -> bool:
        return self._index >= len(self._lines)

    @property
    def current_line(self) -> str:
        """Active target line, empty once the passage is complete."""
        if self.is_passage_complete:
            return ""
        return self._lines[self._index]

    @property
    def next_line(self) -> str:
        if self._index + 1 < len(self._lines):
            return self._lines[self._index + 1]
        return ""

    @property
    def current_input_length(self) -> int:
        return len(self._buffer)

    @property
    def typed_text(self) -> str:
        return "".join(self._buffer)

    @property
    def has_started(self) -> bool:
        return self._started_at is not None

    @property
    def started_at(self) -> Optional[float]:
        return self._started_at

    @property
    def finished_at(self) -> Optional[float]:
        return self._finished_at

    def load_passage(self, lines: Iterable[str]) -> None:
        """Replace the passage and reset the run. Blank entries are dropped."""
        self._lines = [line for line in lines if line and line.strip()]
        if not self._lines:
            logger.warning("Passage has no non-blank lines; using placeholder")
            self._lines = [PLACEHOLDER_LINE]
        self.reset_run_state()
        logger.debug("Loaded passage with %d line(s)", len(self._lines))

    def reset_run_state(self) -> None:
        self._buffer.clear()
        self._index = 0
        self._started_at = None
        self._finished_at = None
        self._stats.reset()
        self._submitted_chars = 0
        self._submitted_words = 0
        self._evaluated_chars = 0
        self._correct_chars = 0

    def ensure_timing_started(self) -> None:
        if self._started_at is None:
            self._started_at = time.time()

    def is_current_target_hangul(self) -> bool:
        """Whether the character to be typed next is Hangul.

        Past the end of a full line the last character is checked instead.
        """
        line = self.current_line
        if not line:
            return False
        idx = min(len(self._buffer), len(line) - 1)
        return is_hangul(line[idx])

    def try_apply_text(self, ch: str) -> bool:
        """Append one committed character; keystrokes past the line end are dropped."""
        if self.is_passage_complete:
            return False
        line = self.current_line
        if len(self._buffer) >= len(line):
            return False

        self.ensure_timing_started()
        self._stats.total_keystrokes += 1
        if line[len(self._buffer)] == ch:
            self._stats.correct_keystrokes += 1
        self._buffer.append(ch)
        return True

    def handle_backspace(self) -> bool:
        if not self._buffer:
            return False
        self._buffer.pop()
        return True

    def can_advance_line(self) -> bool:
        """True once the line is filled; typos do not block submission."""
        if self.is_passage_complete:
            return False
        return len(self._buffer) == len(self.current_line)

    def advance_line(self) -> bool:
        """Score the filled line and move to the next one."""
        if not self.can_advance_line():
            return False

        line = self.current_line
        self._submitted_chars += len(line)
        self._submitted_words += count_words(line)
        self._evaluated_chars += len(line)
        self._correct_chars += sum(1 for typed, target in zip(self._buffer, line) if typed == target)

        self._buffer.clear()
        self._index += 1
        if self.is_passage_complete:
            self._finished_at = time.time()
            logger.debug("Passage complete after %d line(s)", len(self._lines))
        return True

    def build_render_line(self) -> List[RenderCharacter]:
        rendered: List[RenderCharacter] = []
        for i, target in enumerate(self.current_line):
            if i >= len(self._buffer):
                state = LineCharState.PENDING
            elif self._buffer[i] == target:
                state = LineCharState.CORRECT
            else:
                state = LineCharState.INCORRECT
            rendered.append(RenderCharacter(target, state))
        return rendered

    def calculate_results(self) -> TypingResults:
        """CPM, WPM and accuracy over the submitted lines.

        Before the passage is complete the clock runs to now, which allows
        showing live stats mid-run.
        """
        if self._started_at is None:
            return TypingResults(0.0, 0.0, 100.0)

        end = self._finished_at if self._finished_at is not None else time.time()
        elapsed_minutes = max((end - self._started_at) / 60.0, _MIN_ELAPSED_MINUTES)
        if self._evaluated_chars == 0:
            accuracy = 100.0
        else:
            accuracy = self._correct_chars * 100.0 / self._evaluated_chars
        return TypingResults(
            cpm=self._submitted_chars / elapsed_minutes,
            wpm=self._submitted_words / elapsed_minutes,
            accuracy=accuracy,
        )
