from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


def default_settings_dir() -> Path:
    return Path.home() / ".taja"


@dataclass(frozen=True)
class PracticeSettings:
    # None means: use ~/.taja/passages.yaml when present, else built-in passages.
    passages_file: Optional[Path] = None
    short_passage_max_lines: int = 2
    space_submits_line: bool = True
    hangul_composition: bool = True


class SettingsStore:
    """YAML-backed practice settings. File: ~/.taja/settings.yaml by default.

    Unknown keys are ignored; a bad value falls back to that field's default.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else default_settings_dir() / "settings.yaml"

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> PracticeSettings:
        data = self._read()
        defaults = PracticeSettings()

        short_max = data.get("short_passage_max_lines", defaults.short_passage_max_lines)
        if isinstance(short_max, bool) or not isinstance(short_max, int) or short_max < 0:
            logger.warning("Invalid short_passage_max_lines %r in %s", short_max, self._path)
            short_max = defaults.short_passage_max_lines

        return PracticeSettings(
            passages_file=self._passages_file(data.get("passages_file")),
            short_passage_max_lines=short_max,
            space_submits_line=self._flag(data, "space_submits_line", defaults.space_submits_line),
            hangul_composition=self._flag(data, "hangul_composition", defaults.hangul_composition),
        )

    def save(self, settings: PracticeSettings) -> None:
        payload: Dict[str, Any] = {}
        for f in fields(settings):
            value = getattr(settings, f.name)
            if isinstance(value, Path):
                value = str(value)
            if value is not None:
                payload[f.name] = value
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8") as fh:
                yaml.safe_dump(payload, fh, allow_unicode=True, sort_keys=True)
            os.replace(str(tmp), str(self._path))
        except OSError as e:
            logger.warning("Could not save settings to %s: %s", self._path, e)

    def _read(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (yaml.YAMLError, OSError) as e:
            logger.warning("Could not load settings from %s: %s", self._path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring settings in %s: expected a mapping", self._path)
            return {}
        return data

    def _flag(self, data: Dict[str, Any], key: str, default: bool) -> bool:
        value = data.get(key, default)
        if not isinstance(value, bool):
            logger.warning("Invalid %s %r in %s", key, value, self._path)
            return default
        return value

    def _passages_file(self, value: Any) -> Optional[Path]:
        if value is None:
            candidate = self._path.parent / "passages.yaml"
            return candidate if candidate.exists() else None
        if not isinstance(value, str) or not value.strip():
            logger.warning("Invalid passages_file %r in %s", value, self._path)
            return None
        return Path(value.strip()).expanduser()
