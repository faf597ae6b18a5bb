"""2-beolsik Hangul composer for ASCII key input.

Lets users type Korean syllables while the keyboard delivers Latin letters.
A block greedily absorbs leading consonant, vowel and trailing consonant and
spills into a new block when a filled slot receives another jamo of the
same class.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from taja.core.hangul import (
    COMPOUND_TAILS,
    COMPOUND_VOWELS,
    KEY_TO_CONSONANT,
    KEY_TO_VOWEL,
    NULL_CONSONANT,
    TAIL_SPLIT,
    VOWEL_SPLIT,
    compose_syllable,
)


class BlockStage(Enum):
    EMPTY = "empty"
    INITIAL = "initial"
    MEDIAL = "medial"
    FINAL = "final"


@dataclass(frozen=True)
class JamoSlots:
    """The open syllable block: up to three jamo filled in order."""

    initial: Optional[str] = None
    medial: Optional[str] = None
    final: Optional[str] = None
    # Set when ``initial`` is the null consonant inserted for a bare vowel.
    implicit_initial: bool = False

    def __post_init__(self) -> None:
        if self.medial is not None and self.initial is None:
            raise ValueError("medial jamo requires an initial")
        if self.final is not None and self.medial is None:
            raise ValueError("final jamo requires a medial")

    @property
    def stage(self) -> BlockStage:
        if self.final is not None:
            return BlockStage.FINAL
        if self.medial is not None:
            return BlockStage.MEDIAL
        if self.initial is not None:
            return BlockStage.INITIAL
        return BlockStage.EMPTY

    def render(self) -> str:
        """Text of the block as it stands; a lone consonant renders bare."""
        if self.initial is None:
            return ""
        if self.medial is None:
            return self.initial
        return compose_syllable(self.initial, self.medial, self.final or "")


_EMPTY = JamoSlots()


class HangulComposer:
    """Turns a stream of keys into committed syllable blocks."""

    def __init__(self) -> None:
        self._slots = _EMPTY

    @property
    def slots(self) -> JamoSlots:
        return self._slots

    @property
    def composition_text(self) -> str:
        """Preview of the open block, partially filled slots included."""
        return self._slots.render()

    @property
    def is_composing(self) -> bool:
        return self._slots.stage is not BlockStage.EMPTY

    @staticmethod
    def is_mappable(key: str) -> bool:
        return key in KEY_TO_CONSONANT or key in KEY_TO_VOWEL

    def reset(self) -> None:
        self._slots = _EMPTY

    def flush(self) -> str:
        """Commit whatever block is open and clear the slots."""
        text = self._slots.render()
        self.reset()
        return text

    def process_key(self, key: str) -> str:
        """Feed one key and return the text committed by it (possibly empty).

        Unmappable keys flush the open block and pass through verbatim.
        """
        if key in KEY_TO_VOWEL:
            return self._process_vowel(KEY_TO_VOWEL[key])
        if key in KEY_TO_CONSONANT:
            return self._process_consonant(KEY_TO_CONSONANT[key])
        return self.flush() + key

    def handle_backspace(self) -> bool:
        """Undo the last jamo absorbed by the open block.

        Returns False when no block is open, so the caller can delete a
        previously committed character instead.
        """
        slots = self._slots
        stage = slots.stage
        if stage is BlockStage.EMPTY:
            return False
        if stage is BlockStage.FINAL:
            split = TAIL_SPLIT.get(slots.final)
            self._slots = replace(slots, final=split[0] if split else None)
        elif stage is BlockStage.MEDIAL:
            split = VOWEL_SPLIT.get(slots.medial)
            if split:
                self._slots = replace(slots, medial=split[0])
            elif slots.implicit_initial:
                self._slots = _EMPTY
            else:
                self._slots = replace(slots, medial=None)
        else:
            self._slots = _EMPTY
        return True

    def _process_vowel(self, vowel: str) -> str:
        slots = self._slots
        stage = slots.stage

        if stage is BlockStage.EMPTY:
            self._slots = JamoSlots(NULL_CONSONANT, vowel, implicit_initial=True)
            return ""

        if stage is BlockStage.INITIAL:
            self._slots = replace(slots, medial=vowel)
            return ""

        if stage is BlockStage.MEDIAL:
            merged = COMPOUND_VOWELS.get((slots.medial, vowel))
            if merged is not None:
                self._slots = replace(slots, medial=merged)
                return ""
            commit = slots.render()
            self._slots = JamoSlots(NULL_CONSONANT, vowel, implicit_initial=True)
            return commit

        # The trailing consonant (or its second half) moves to the new block.
        split = TAIL_SPLIT.get(slots.final)
        if split is not None:
            kept, moved = split
        else:
            kept, moved = "", slots.final
        commit = compose_syllable(slots.initial, slots.medial, kept)
        self._slots = JamoSlots(moved, vowel)
        return commit

    def _process_consonant(self, consonant: str) -> str:
        slots = self._slots
        stage = slots.stage

        if stage is BlockStage.EMPTY:
            self._slots = JamoSlots(consonant)
            return ""

        if stage is BlockStage.INITIAL:
            commit = slots.initial
            self._slots = JamoSlots(consonant)
            return commit

        if stage is BlockStage.MEDIAL:
            self._slots = replace(slots, final=consonant)
            return ""

        merged = COMPOUND_TAILS.get((slots.final, consonant))
        if merged is not None:
            self._slots = replace(slots, final=merged)
            return ""
        commit = slots.render()
        self._slots = JamoSlots(consonant)
        return commit
