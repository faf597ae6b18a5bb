from __future__ import annotations

import logging
import random
import re
from pathlib import Path
from typing import Iterable, List, Optional

import yaml

logger = logging.getLogger(__name__)

NO_PASSAGE_LINE = "No passage loaded."

FALLBACK_PASSAGES: List[str] = [
    "짧게 정확하게 치는 연습이 속도의 시작이다.",
    "하루 10분의 반복은 분명한 변화를 만든다.",
    "코드는 읽기 쉬워야 오래 살아남는다. 짧은 함수와 명확한 이름이 버그를 줄인다. "
    "테스트는 두려움을 자신감으로 바꾼다.",
    "집중은 한 번에 한 가지 일에서 나온다. 알림을 끄고 호흡을 고르면 마음이 정리된다. "
    "작은 완료를 쌓아 큰 목표에 도달하자.",
    "이 문장은 장문 예시다. 시작은 느리지만 정확하게 치는 것이 중요하다. "
    "속도는 정확도가 안정된 다음에 따라온다. 호흡을 일정하게 유지하고 오타를 줄여 보자. "
    "오늘의 연습이 내일의 자신감을 만든다.",
]

_SENTENCE_END = re.compile(r"[.!?]")


def split_into_lines(text: str) -> List[str]:
    """Break a passage into practice lines, one sentence per line.

    Sentence terminators are dropped along with surrounding whitespace.
    """
    lines: List[str] = []
    for raw in text.replace("\r\n", "\n").split("\n"):
        line = raw.strip()
        if not line:
            continue
        sentences = [s.strip() for s in _SENTENCE_END.split(line) if s.strip()]
        if sentences:
            lines.extend(sentences)
        else:
            lines.append(line)
    return lines


def load_passage_texts(path: Path) -> List[str]:
    """Read passage texts from a YAML file.

    The file holds either a list of strings or a mapping with a
    ``passages`` list.
    """
    if not path.exists():
        raise FileNotFoundError(f"Passage file not found: {path}")
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("passages")
    if not isinstance(raw, list):
        raise ValueError(f"{path.name}: expected a list of passages")
    texts = [str(item).strip() for item in raw if item is not None and str(item).strip()]
    if not texts:
        raise ValueError(f"{path.name}: no passages")
    return texts


class PassageProvider:
    """Supplies passages, alternating at random between short and long ones.

    A passage with at most ``short_max_lines`` lines is short. The same
    passage is never picked twice in a row from a pool.
    """

    def __init__(
        self,
        texts: Optional[Iterable[str]] = None,
        short_max_lines: int = 2,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._random = rng or random.Random()
        self._short: List[List[str]] = []
        self._long: List[List[str]] = []
        self._last_short = -1
        self._last_long = -1

        passages = self._normalize(texts or [])
        if not passages:
            passages = self._normalize(FALLBACK_PASSAGES)

        for lines in passages:
            if len(lines) <= short_max_lines:
                self._short.append(lines)
            else:
                self._long.append(lines)

        if not self._short and self._long:
            self._short.extend(self._long[:2])
        if not self._long and self._short:
            self._long.extend(self._short)

    @classmethod
    def from_file(
        cls,
        path: Path,
        short_max_lines: int = 2,
        rng: Optional[random.Random] = None,
    ) -> "PassageProvider":
        """Build a provider from a YAML passage file, falling back to built-ins."""
        try:
            texts = load_passage_texts(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning("Could not load passages from %s: %s", path, e)
            texts = []
        else:
            logger.info("Loaded %d passage(s) from %s", len(texts), path)
        return cls(texts, short_max_lines=short_max_lines, rng=rng)

    @property
    def short_passages(self) -> List[List[str]]:
        return [list(p) for p in self._short]

    @property
    def long_passages(self) -> List[List[str]]:
        return [list(p) for p in self._long]

    def next_passage(self) -> List[str]:
        if not self._short and not self._long:
            return [NO_PASSAGE_LINE]

        pick_long = not self._short or (bool(self._long) and self._random.random() >= 0.5)
        if pick_long:
            passage, self._last_long = self._pick(self._long, self._last_long)
        else:
            passage, self._last_short = self._pick(self._short, self._last_short)
        return list(passage)

    def _pick(self, items: List[List[str]], last_index: int) -> tuple[List[str], int]:
        if len(items) == 1:
            return items[0], 0
        index = self._random.randrange(len(items))
        if index == last_index:
            index = (index + 1 + self._random.randrange(len(items) - 1)) % len(items)
        return items[index], index

    @staticmethod
    def _normalize(texts: Iterable[str]) -> List[List[str]]:
        result: List[List[str]] = []
        for text in texts:
            lines = split_into_lines(text)
            if lines:
                result.append(lines)
        return result
