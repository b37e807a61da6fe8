"""Progress tracking and observer notification for translation runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional

from tqdm import tqdm

from .models import TranslationStatus

logger = logging.getLogger(__name__)


@dataclass
class TranslationProgress:
    """Progress of one translation run."""

    total: int
    completed: int = 0
    current: str = ""
    errors: List[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.completed >= self.total

    @property
    def completion_rate(self) -> float:
        """完成率 (0-1)。"""
        if self.total == 0:
            return 1.0
        return self.completed / self.total

    def advance_to(self, completed: int) -> None:
        """Move ``completed`` forward; it never goes backwards or past ``total``."""
        self.completed = min(max(self.completed, completed), self.total)

    def snapshot(self) -> "TranslationProgress":
        """Independent copy handed to observers."""
        return replace(self, errors=list(self.errors))


class TranslationObserver:
    """
    Receives progress and status events from a run.

    Subclass and override the hooks you need; the defaults do nothing.
    """

    def on_progress(self, progress: TranslationProgress) -> None:
        pass

    def on_status(self, status: TranslationStatus) -> None:
        pass


class ProgressReporter:
    """Event channel between an orchestrator and any number of observers."""

    def __init__(self) -> None:
        self._observers: List[TranslationObserver] = []

    def subscribe(self, observer: TranslationObserver) -> Callable[[], None]:
        """
        Register ``observer``.

        Returns:
            A function that unsubscribes it again
        """
        if observer not in self._observers:
            self._observers.append(observer)
        return lambda: self.unsubscribe(observer)

    def unsubscribe(self, observer: TranslationObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def close(self) -> None:
        """Drop all observers."""
        self._observers.clear()

    def __len__(self) -> int:
        return len(self._observers)

    def emit_progress(self, progress: TranslationProgress) -> None:
        snapshot = progress.snapshot()
        for observer in list(self._observers):
            try:
                observer.on_progress(snapshot)
            except Exception:
                logger.exception(f"Progress observer {observer!r} failed")

    def emit_status(self, status: TranslationStatus) -> None:
        for observer in list(self._observers):
            try:
                observer.on_status(status)
            except Exception:
                logger.exception(f"Status observer {observer!r} failed")


class TqdmProgressObserver(TranslationObserver):
    """Console progress bar for a single run."""

    def __init__(self, desc: str = "Translating", **tqdm_kwargs) -> None:
        self.desc = desc
        self.tqdm_kwargs = tqdm_kwargs
        self._bar: Optional[tqdm] = None
        self._error_count = 0

    def on_progress(self, progress: TranslationProgress) -> None:
        if self._bar is None:
            self._bar = tqdm(total=progress.total, desc=self.desc, unit="entry", **self.tqdm_kwargs)

        self._bar.update(progress.completed - self._bar.n)

        if len(progress.errors) != self._error_count:
            self._error_count = len(progress.errors)
            self._bar.set_postfix(errors=self._error_count)

    def on_status(self, status: TranslationStatus) -> None:
        if status == TranslationStatus.PAUSED and self._bar is not None:
            self._bar.set_description(f"{self.desc} (paused)")
        elif status == TranslationStatus.RUNNING and self._bar is not None:
            self._bar.set_description(self.desc)
        elif status in (
            TranslationStatus.COMPLETED,
            TranslationStatus.CANCELLED,
            TranslationStatus.FAILED,
        ):
            self.close()

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
