"""WebVTT parsing and serialization."""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from .errors import SubtitleFormatError
from .models import SubtitleEntry, SubtitleFile, SubtitleFormat
from .text_utils import normalize_content

logger = logging.getLogger(__name__)

# Hours are optional in WebVTT; cue settings may follow the end time.
_TIMECODE_RE = re.compile(
    r"^(?:(\d{2,}):)?(\d{2}):(\d{2})\.(\d{3})\s*-->\s*"
    r"(?:(\d{2,}):)?(\d{2}):(\d{2})\.(\d{3})"
)

_IGNORED_BLOCKS = ("NOTE", "STYLE", "REGION")


def _to_ms(h: Optional[str], m: str, s: str, ms: str) -> int:
    return int(h or 0) * 3600000 + int(m) * 60000 + int(s) * 1000 + int(ms)


def format_timestamp(milliseconds: int) -> str:
    """Format milliseconds as ``HH:MM:SS.mmm``."""
    hours, rest = divmod(milliseconds, 3600000)
    minutes, rest = divmod(rest, 60000)
    seconds, ms = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{ms:03d}"


def _is_header(line: str) -> bool:
    return line == "WEBVTT" or (line.startswith("WEBVTT") and line[6] in " \t")


def parse_vtt(content: str, filename: str = "") -> SubtitleFile:
    """
    Parse WebVTT content into a SubtitleFile.

    Raises:
        SubtitleFormatError: if the first non-blank line is not a WEBVTT header
    """
    lines = normalize_content(content).split("\n")

    pos = 0
    while pos < len(lines) and not lines[pos].strip():
        pos += 1
    if pos >= len(lines) or not _is_header(lines[pos].strip()):
        raise SubtitleFormatError("Invalid VTT file: missing WEBVTT header")

    entries: List[SubtitleEntry] = []
    next_id = 1
    timing: Optional[tuple[int, int]] = None
    text_lines: List[str] = []

    def flush() -> None:
        nonlocal next_id
        if timing is not None and text_lines:
            try:
                entries.append(SubtitleEntry(
                    id=next_id,
                    start_time=timing[0],
                    end_time=timing[1],
                    text="\n".join(text_lines),
                ))
                next_id += 1
            except ValueError as e:
                logger.debug(f"Skipping cue: {e}")

    for raw in lines[pos + 1:]:
        line = raw.strip()

        if not line:
            flush()
            timing, text_lines = None, []
            continue

        match = _TIMECODE_RE.match(line)
        if match:
            # a new timecode without a blank line closes the previous cue
            flush()
            g = match.groups()
            timing, text_lines = (_to_ms(*g[:4]), _to_ms(*g[4:])), []
            continue

        if line.startswith(_IGNORED_BLOCKS):
            continue

        if timing is not None:
            text_lines.append(line)

    flush()

    if not entries:
        logger.warning("No valid VTT cues found in content")

    subtitle = SubtitleFile(name=filename, format=SubtitleFormat.VTT, entries=entries)
    subtitle.sort_entries()
    return subtitle


def serialize_vtt(subtitle: SubtitleFile) -> str:
    """Convert a SubtitleFile to WebVTT text, preferring translated text."""
    blocks = [
        f"{format_timestamp(e.start_time)} --> {format_timestamp(e.end_time)}\n{e.display_text}"
        for e in subtitle.entries
    ]
    return "WEBVTT\n\n" + "\n\n".join(blocks)
