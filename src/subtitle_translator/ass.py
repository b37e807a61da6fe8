"""ASS/SSA parsing and serialization.

Only the ``[Events]`` section is turned into entries. Styling, positioning
and override tags are not reconstructed on export.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from .models import SubtitleEntry, SubtitleFile, SubtitleFormat
from .text_utils import normalize_content

logger = logging.getLogger(__name__)

DEFAULT_EVENT_FORMAT = [
    "Layer", "Start", "End", "Style", "Name",
    "MarginL", "MarginR", "MarginV", "Effect", "Text",
]

_TIME_RE = re.compile(r"(\d+):(\d{2}):(\d{2})\.(\d{2})")
_OVERRIDE_RE = re.compile(r"\{[^}]*\}")

ASS_HEADER = """[Script Info]
Title: Translated Subtitle
ScriptType: v4.00+

[V4+ Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding
Style: Default,Arial,20,&H00FFFFFF,&H000000FF,&H00000000,&H80000000,0,0,0,0,100,100,0,0,1,2,0,2,10,10,10,1

[Events]
Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
"""


def parse_time(value: str) -> Optional[int]:
    """Parse ``H:MM:SS.CC`` into milliseconds, or None if malformed."""
    match = _TIME_RE.fullmatch(value.strip())
    if not match:
        return None
    h, m, s, cs = (int(x) for x in match.groups())
    return h * 3600000 + m * 60000 + s * 1000 + cs * 10


def format_timestamp(milliseconds: int) -> str:
    """Format milliseconds as ``H:MM:SS.CC`` (sub-centisecond part is dropped)."""
    hours, rest = divmod(milliseconds, 3600000)
    minutes, rest = divmod(rest, 60000)
    seconds, ms = divmod(rest, 1000)
    return f"{hours:d}:{minutes:02d}:{seconds:02d}.{ms // 10:02d}"


def split_dialogue_fields(data: str, field_count: int = len(DEFAULT_EVENT_FORMAT)) -> List[str]:
    """
    Split the value part of a ``Dialogue:`` line.

    Commas inside ``{...}`` override blocks are literal, and splitting stops
    once ``field_count - 1`` delimiters were consumed so the last field
    (normally ``Text``) keeps its own commas.
    """
    max_splits = max(field_count - 1, 0)
    fields: List[str] = []
    current: List[str] = []
    depth = 0

    for char in data:
        if char == "{":
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1

        if char == "," and depth == 0 and len(fields) < max_splits:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def clean_text(text: str) -> str:
    """Strip override tags and decode ASS escapes into plain text."""
    text = _OVERRIDE_RE.sub("", text)
    text = text.replace("\\N", "\n").replace("\\n", "\n").replace("\\h", " ")
    return text.strip()


def _parse_dialogue(data: str, format_fields: List[str], entry_id: int) -> Optional[SubtitleEntry]:
    values = split_dialogue_fields(data, len(format_fields))
    if len(values) < len(format_fields):
        return None

    field_map: Dict[str, str] = dict(zip(format_fields, values))

    start = parse_time(field_map.get("Start", ""))
    end = parse_time(field_map.get("End", ""))
    text = clean_text(field_map.get("Text", ""))

    if start is None or end is None or not text:
        return None

    try:
        return SubtitleEntry(id=entry_id, start_time=start, end_time=end, text=text)
    except ValueError as e:
        logger.debug(f"Skipping dialogue: {e}")
        return None


def parse_ass(content: str, filename: str = "") -> SubtitleFile:
    """
    Parse ASS/SSA content into a SubtitleFile.

    ``[Script Info]`` key/value pairs are kept as metadata. Dialogue lines
    with bad timing or no visible text are dropped.
    """
    entries: List[SubtitleEntry] = []
    metadata: Dict[str, str] = {}
    section = ""
    format_fields = list(DEFAULT_EVENT_FORMAT)
    next_id = 1

    for raw in normalize_content(content).split("\n"):
        line = raw.strip()
        if not line:
            continue

        if line.startswith("[") and line.endswith("]"):
            section = line
            continue

        if section == "[Script Info]":
            if line.startswith(";"):
                continue
            key, sep, value = line.partition(":")
            if sep:
                metadata[key.strip()] = value.strip()
            continue

        if section != "[Events]":
            continue

        if line.startswith("Format:"):
            format_fields = [f.strip() for f in line[len("Format:"):].split(",")]
            continue

        if line.startswith("Dialogue:"):
            entry = _parse_dialogue(line[len("Dialogue:"):].strip(), format_fields, next_id)
            if entry is None:
                logger.debug(f"Skipping dialogue line: {line[:60]!r}")
                continue
            entries.append(entry)
            next_id += 1

    if not entries:
        logger.warning("No valid ASS dialogue lines found in content")

    subtitle = SubtitleFile(
        name=filename, format=SubtitleFormat.ASS, entries=entries, metadata=metadata
    )
    subtitle.sort_entries()
    return subtitle


def serialize_ass(subtitle: SubtitleFile) -> str:
    """Convert a SubtitleFile to ASS text with a single default style."""
    dialogues = []
    for e in subtitle.entries:
        text = e.display_text.replace("\n", "\\N")
        dialogues.append(
            f"Dialogue: 0,{format_timestamp(e.start_time)},{format_timestamp(e.end_time)},"
            f"Default,,0,0,0,,{text}"
        )
    return ASS_HEADER + "\n".join(dialogues)
