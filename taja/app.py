"""Application setup for the Taja typing judge."""

import logging
from pathlib import Path
from typing import Optional

from taja.core.composer import HangulComposer
from taja.core.engine import TypingEngine
from taja.core.passages import PassageProvider
from taja.core.practice import PracticeController
from taja.core.settings import SettingsStore


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_practice(settings_path: Optional[Path] = None) -> PracticeController:
    """Wire settings, passages, engine and composer, with the first passage loaded."""
    settings = SettingsStore(settings_path).load()

    if settings.passages_file is not None:
        passages = PassageProvider.from_file(
            settings.passages_file,
            short_max_lines=settings.short_passage_max_lines,
        )
    else:
        logging.info("No passage file configured; using built-in passages")
        passages = PassageProvider(short_max_lines=settings.short_passage_max_lines)

    controller = PracticeController(TypingEngine(), HangulComposer(), passages, settings)
    controller.load_next_passage()
    return controller
