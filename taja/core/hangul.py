"""Hangul jamo tables and syllable composition for 2-beolsik key input.

Pure domain data: no I/O and no mutable state. Every table is wrapped in a
read-only mapping so it can be shared freely.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final, Mapping, Tuple

HANGUL_BASE: Final[int] = 0xAC00

SYLLABLE_FIRST: Final[str] = "가"
SYLLABLE_LAST: Final[str] = "힣"
JAMO_FIRST: Final[str] = "ㄱ"
JAMO_LAST: Final[str] = "ㆎ"

# Leading consonant used when a syllable starts with a vowel.
NULL_CONSONANT: Final[str] = "ㅇ"

LEADS: Final[Tuple[str, ...]] = (
    "ㄱ", "ㄲ", "ㄴ", "ㄷ", "ㄸ", "ㄹ", "ㅁ", "ㅂ", "ㅃ", "ㅅ",
    "ㅆ", "ㅇ", "ㅈ", "ㅉ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
)

VOWELS: Final[Tuple[str, ...]] = (
    "ㅏ", "ㅐ", "ㅑ", "ㅒ", "ㅓ", "ㅔ", "ㅕ", "ㅖ", "ㅗ", "ㅘ", "ㅙ",
    "ㅚ", "ㅛ", "ㅜ", "ㅝ", "ㅞ", "ㅟ", "ㅠ", "ㅡ", "ㅢ", "ㅣ",
)

# Index 0 is "no trailing consonant".
TAILS: Final[Tuple[str, ...]] = (
    "", "ㄱ", "ㄲ", "ㄳ", "ㄴ", "ㄵ", "ㄶ", "ㄷ", "ㄹ", "ㄺ", "ㄻ", "ㄼ", "ㄽ", "ㄾ",
    "ㄿ", "ㅀ", "ㅁ", "ㅂ", "ㅄ", "ㅅ", "ㅆ", "ㅇ", "ㅈ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
)

KEY_TO_CONSONANT: Final[Mapping[str, str]] = MappingProxyType({
    "r": "ㄱ", "R": "ㄲ", "s": "ㄴ", "e": "ㄷ", "E": "ㄸ", "f": "ㄹ",
    "a": "ㅁ", "q": "ㅂ", "Q": "ㅃ", "t": "ㅅ", "T": "ㅆ", "d": "ㅇ",
    "w": "ㅈ", "W": "ㅉ", "c": "ㅊ", "z": "ㅋ", "x": "ㅌ", "v": "ㅍ", "g": "ㅎ",
})

KEY_TO_VOWEL: Final[Mapping[str, str]] = MappingProxyType({
    "k": "ㅏ", "o": "ㅐ", "i": "ㅑ", "O": "ㅒ", "j": "ㅓ", "p": "ㅔ", "u": "ㅕ",
    "P": "ㅖ", "h": "ㅗ", "y": "ㅛ", "n": "ㅜ", "b": "ㅠ", "m": "ㅡ", "l": "ㅣ",
})

COMPOUND_VOWELS: Final[Mapping[Tuple[str, str], str]] = MappingProxyType({
    ("ㅗ", "ㅏ"): "ㅘ", ("ㅗ", "ㅐ"): "ㅙ", ("ㅗ", "ㅣ"): "ㅚ",
    ("ㅜ", "ㅓ"): "ㅝ", ("ㅜ", "ㅔ"): "ㅞ", ("ㅜ", "ㅣ"): "ㅟ",
    ("ㅡ", "ㅣ"): "ㅢ",
})

COMPOUND_TAILS: Final[Mapping[Tuple[str, str], str]] = MappingProxyType({
    ("ㄱ", "ㅅ"): "ㄳ", ("ㄴ", "ㅈ"): "ㄵ", ("ㄴ", "ㅎ"): "ㄶ",
    ("ㄹ", "ㄱ"): "ㄺ", ("ㄹ", "ㅁ"): "ㄻ", ("ㄹ", "ㅂ"): "ㄼ",
    ("ㄹ", "ㅅ"): "ㄽ", ("ㄹ", "ㅌ"): "ㄾ", ("ㄹ", "ㅍ"): "ㄿ",
    ("ㄹ", "ㅎ"): "ㅀ", ("ㅂ", "ㅅ"): "ㅄ",
})

VOWEL_SPLIT: Final[Mapping[str, Tuple[str, str]]] = MappingProxyType(
    {merged: pair for pair, merged in COMPOUND_VOWELS.items()}
)

TAIL_SPLIT: Final[Mapping[str, Tuple[str, str]]] = MappingProxyType(
    {merged: pair for pair, merged in COMPOUND_TAILS.items()}
)

_LEAD_INDEX: Final[Mapping[str, int]] = MappingProxyType({ch: i for i, ch in enumerate(LEADS)})
_VOWEL_INDEX: Final[Mapping[str, int]] = MappingProxyType({ch: i for i, ch in enumerate(VOWELS)})
_TAIL_INDEX: Final[Mapping[str, int]] = MappingProxyType({ch: i for i, ch in enumerate(TAILS)})


def compose_syllable(initial: str, medial: str, final: str = "") -> str:
    """Compose a syllable block from its jamo.

    Returns the bare ``initial`` when any of the three lookups fails, e.g. a
    tense consonant such as ㄸ that never appears in the trailing position.
    """
    li = _LEAD_INDEX.get(initial)
    vi = _VOWEL_INDEX.get(medial)
    ti = _TAIL_INDEX.get(final or "")
    if li is None or vi is None or ti is None:
        return initial
    return chr(HANGUL_BASE + (li * len(VOWELS) + vi) * len(TAILS) + ti)


def is_hangul(ch: str) -> bool:
    """True for a composed syllable or a compatibility jamo."""
    if len(ch) != 1:
        return False
    return SYLLABLE_FIRST <= ch <= SYLLABLE_LAST or JAMO_FIRST <= ch <= JAMO_LAST
