"""SRT (SubRip) parsing and serialization."""

from __future__ import annotations

import logging
import re
from typing import List

from .models import SubtitleEntry, SubtitleFile, SubtitleFormat
from .text_utils import normalize_content

logger = logging.getLogger(__name__)

_BLOCK_SPLIT_RE = re.compile(r"\n[ \t]*\n")

_TIMECODE_RE = re.compile(
    r"(\d{2}):(\d{2}):(\d{2})[,.](\d{3})\s*-->\s*"
    r"(\d{2}):(\d{2}):(\d{2})[,.](\d{3})"
)


def _to_ms(h: str, m: str, s: str, ms: str) -> int:
    return int(h) * 3600000 + int(m) * 60000 + int(s) * 1000 + int(ms)


def format_timestamp(milliseconds: int) -> str:
    """Format milliseconds as ``HH:MM:SS,mmm``."""
    hours, rest = divmod(milliseconds, 3600000)
    minutes, rest = divmod(rest, 60000)
    seconds, ms = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{ms:03d}"


def parse_srt(content: str, filename: str = "") -> SubtitleFile:
    """
    Parse SRT content into a SubtitleFile.

    Blocks that do not have the ``index / timecode / text`` shape are
    skipped instead of failing the whole file.

    Args:
        content: Raw SRT file content
        filename: Name recorded on the resulting file

    Returns:
        SubtitleFile with entries sorted by start time
    """
    entries: List[SubtitleEntry] = []
    content = normalize_content(content).strip()

    blocks = _BLOCK_SPLIT_RE.split(content) if content else []

    for block in blocks:
        lines = block.strip().split("\n")
        if len(lines) < 3:
            logger.debug(f"Skipping short block: {block[:40]!r}")
            continue

        try:
            index = int(lines[0].strip())
        except ValueError:
            logger.debug(f"Skipping block with invalid index: {lines[0]!r}")
            continue

        match = _TIMECODE_RE.search(lines[1])
        if not match:
            logger.debug(f"Skipping block {index}: invalid timecode {lines[1]!r}")
            continue

        text = "\n".join(lines[2:]).strip()
        if not text:
            continue

        g = match.groups()
        try:
            entries.append(SubtitleEntry(
                id=index,
                start_time=_to_ms(*g[:4]),
                end_time=_to_ms(*g[4:]),
                text=text,
            ))
        except ValueError as e:
            logger.debug(f"Skipping block {index}: {e}")

    if not entries:
        logger.warning("No valid SRT entries found in content")

    subtitle = SubtitleFile(name=filename, format=SubtitleFormat.SRT, entries=entries)
    subtitle.sort_entries()
    return subtitle


def serialize_srt(subtitle: SubtitleFile) -> str:
    """Convert a SubtitleFile to SRT text, preferring translated text."""
    blocks = [
        f"{e.id}\n{format_timestamp(e.start_time)} --> {format_timestamp(e.end_time)}\n{e.display_text}"
        for e in subtitle.entries
    ]
    return "\n\n".join(blocks)
