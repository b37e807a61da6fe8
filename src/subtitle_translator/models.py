"""Data models for subtitle files and translation requests."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional


class SubtitleFormat(str, Enum):
    """Supported subtitle file formats."""

    SRT = "srt"
    VTT = "vtt"
    ASS = "ass"

    @property
    def extension(self) -> str:
        return f".{self.value}"


class TranslationStatus(str, Enum):
    """Lifecycle of a single orchestrator run."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class TranslationQuality(str, Enum):
    """Translation quality mode, used by backend adapters."""

    FAST = "fast"
    STANDARD = "standard"
    PRECISE = "precise"


@dataclass
class SubtitleEntry:
    """A single timed subtitle line with its source/translated text pair."""

    id: int
    start_time: int  # milliseconds
    end_time: int    # milliseconds
    text: str
    original_text: Optional[str] = None
    translated_text: Optional[str] = None

    def __post_init__(self):
        if self.id < 1:
            raise ValueError(f"Entry id must be positive, got {self.id}")
        if self.start_time < 0:
            raise ValueError(f"Start time must not be negative, got {self.start_time}")
        if self.end_time < self.start_time:
            raise ValueError(
                f"End time {self.end_time} is before start time {self.start_time} "
                f"(entry {self.id})"
            )
        if self.original_text is None:
            self.original_text = self.text

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def display_text(self) -> str:
        """Text to export: the translation when present, otherwise the current text."""
        return self.translated_text or self.text

    def copy(self, **changes) -> "SubtitleEntry":
        """Create a copy with optional field changes."""
        return replace(self, **changes)


@dataclass
class SubtitleFile:
    """An ordered collection of subtitle entries parsed from one file."""

    name: str
    format: SubtitleFormat
    entries: List[SubtitleEntry] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)

    def sort_entries(self) -> None:
        """Sort entries by start time (stable, so equal starts keep file order)."""
        self.entries.sort(key=lambda e: e.start_time)

    def copy(self, **changes) -> "SubtitleFile":
        changes.setdefault("entries", list(self.entries))
        changes.setdefault("metadata", dict(self.metadata))
        return replace(self, **changes)

    def __len__(self) -> int:
        return len(self.entries)


CONCURRENCY_MODES = ("low", "medium", "high", "custom")

# mode -> (max_concurrent, batch_size, delay_between_requests ms)
CONCURRENCY_PRESETS: Dict[str, tuple[int, int, int]] = {
    "low": (1, 3, 500),
    "medium": (3, 5, 200),
    "high": (6, 8, 100),
}


@dataclass(frozen=True)
class ConcurrencySettings:
    """
    Request scheduling parameters for a translation run.

    ``mode`` only records which preset produced the numbers; the
    orchestrator reads the numeric fields.
    """

    max_concurrent: int = 3
    batch_size: int = 5
    delay_between_requests: int = 200
    mode: str = "medium"

    def __post_init__(self):
        if self.max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {self.max_concurrent}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        if self.delay_between_requests < 0:
            raise ValueError(
                f"delay_between_requests must be >= 0, got {self.delay_between_requests}"
            )
        if self.mode not in CONCURRENCY_MODES:
            raise ValueError(f"Unknown concurrency mode: {self.mode}")

    @classmethod
    def from_mode(cls, mode: str) -> "ConcurrencySettings":
        """Build settings from one of the ``low``/``medium``/``high`` presets."""
        try:
            max_concurrent, batch_size, delay = CONCURRENCY_PRESETS[mode]
        except KeyError:
            raise ValueError(f"No preset for concurrency mode: {mode}") from None
        return cls(max_concurrent, batch_size, delay, mode)

    @property
    def is_sequential(self) -> bool:
        return self.max_concurrent <= 1


@dataclass
class TranslationRequest:
    """One unit of work sent to a translation capability."""

    text: str
    source_language: str
    target_language: str
    context: Optional[str] = None


@dataclass
class TranslationResponse:
    """Outcome of a translation call: either translated text or an error."""

    translated_text: str = ""
    confidence: Optional[float] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, reason: str) -> "TranslationResponse":
        return cls(translated_text="", error=reason or "Unknown error")

    @property
    def ok(self) -> bool:
        return not self.error and bool(self.translated_text)
