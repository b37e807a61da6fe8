"""Subtitle format detection by file name and by content."""

from __future__ import annotations

import re
from pathlib import PurePath
from typing import Optional

from .errors import UnsupportedFormatError
from .models import SubtitleFormat
from .text_utils import normalize_content

_EXTENSION_MAP = {
    ".srt": SubtitleFormat.SRT,
    ".vtt": SubtitleFormat.VTT,
    ".ass": SubtitleFormat.ASS,
    ".ssa": SubtitleFormat.ASS,
}

_ASS_SECTION_MARKERS = ("[Script Info]", "[V4+ Styles]", "[V4 Styles]")

_SRT_CUE_RE = re.compile(
    r"^\s*\d+[ \t]*\n\d{2}:\d{2}:\d{2},\d{3}\s*-->\s*\d{2}:\d{2}:\d{2},\d{3}",
    re.MULTILINE,
)


def detect_by_name(filename: str) -> Optional[SubtitleFormat]:
    """Map a file extension to a subtitle format."""
    if not filename:
        return None
    return _EXTENSION_MAP.get(PurePath(filename).suffix.lower())


def detect_by_content(content: str) -> Optional[SubtitleFormat]:
    """
    Guess the subtitle format from raw text.

    Heuristics are applied in order and the first match wins:
    a leading ``WEBVTT`` token, an ASS section header, an SRT cue.
    """
    if not content:
        return None

    sample = normalize_content(content).strip()

    if sample.startswith("WEBVTT"):
        return SubtitleFormat.VTT

    if any(marker in sample for marker in _ASS_SECTION_MARKERS):
        return SubtitleFormat.ASS

    if _SRT_CUE_RE.search(sample):
        return SubtitleFormat.SRT

    return None


def detect_format(filename: str = "", content: str = "") -> SubtitleFormat:
    """
    Detect the format from the file name, falling back to the content.

    Raises:
        UnsupportedFormatError: if neither heuristic matches
    """
    fmt = detect_by_name(filename) or detect_by_content(content)
    if fmt is None:
        raise UnsupportedFormatError(filename)
    return fmt
