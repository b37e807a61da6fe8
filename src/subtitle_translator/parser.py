"""Subtitle file parsing, export and file helpers for all supported formats."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from .ass import parse_ass, serialize_ass
from .config import MAX_FILE_SIZE, SUPPORTED_EXTENSIONS
from .detector import detect_format
from .errors import SubtitleFormatError
from .models import SubtitleFile, SubtitleFormat
from .srt import parse_srt, serialize_srt
from .vtt import parse_vtt, serialize_vtt

logger = logging.getLogger(__name__)

_PARSERS: Dict[SubtitleFormat, Callable[[str, str], SubtitleFile]] = {
    SubtitleFormat.SRT: parse_srt,
    SubtitleFormat.VTT: parse_vtt,
    SubtitleFormat.ASS: parse_ass,
}

_SERIALIZERS: Dict[SubtitleFormat, Callable[[SubtitleFile], str]] = {
    SubtitleFormat.SRT: serialize_srt,
    SubtitleFormat.VTT: serialize_vtt,
    SubtitleFormat.ASS: serialize_ass,
}


def parse_subtitle(
    content: str,
    filename: str = "",
    fmt: Optional[SubtitleFormat] = None,
) -> SubtitleFile:
    """
    Parse subtitle content into a SubtitleFile.

    Args:
        content: Raw file content
        filename: Original file name, used for format detection and recorded on the result
        fmt: Explicit format; detected from ``filename``/``content`` when omitted

    Returns:
        Parsed SubtitleFile

    Raises:
        UnsupportedFormatError: format could not be determined
        SubtitleFormatError: content is malformed for the chosen format
    """
    if fmt is None:
        fmt = detect_format(filename, content)

    subtitle = _PARSERS[SubtitleFormat(fmt)](content, filename)
    logger.debug(f"Parsed {len(subtitle)} {subtitle.format.value.upper()} entries from {filename or '<text>'}")
    return subtitle


def serialize_subtitle(subtitle: SubtitleFile, fmt: Optional[SubtitleFormat] = None) -> str:
    """Serialize a SubtitleFile, by default in its own format."""
    return _SERIALIZERS[SubtitleFormat(fmt or subtitle.format)](subtitle)


def validate_subtitle_file(path: Path) -> Optional[str]:
    """
    Validate a subtitle file before processing.

    Args:
        path: Path to subtitle file

    Returns:
        Error message if invalid, None if valid
    """
    if not path.exists():
        return f"File not found: {path}"

    if not path.is_file():
        return f"Not a file: {path}"

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        expected = ", ".join(sorted(SUPPORTED_EXTENSIONS))
        return f"Invalid file extension: {suffix} (expected one of {expected})"

    size = path.stat().st_size
    if size == 0:
        return "File is empty"
    if size > MAX_FILE_SIZE:
        return f"File too large: {size / 1024 / 1024:.1f}MB (max {MAX_FILE_SIZE // 1024 // 1024}MB)"

    return None


def load_subtitle(path: Path, fmt: Optional[SubtitleFormat] = None) -> SubtitleFile:
    """Read and parse a subtitle file from disk."""
    content = path.read_text(encoding="utf-8-sig")
    return parse_subtitle(content, path.name, fmt)


def save_subtitle(
    subtitle: SubtitleFile,
    path: Path,
    fmt: Optional[SubtitleFormat] = None,
) -> None:
    """
    Write a SubtitleFile to disk.

    Args:
        subtitle: File to save
        path: Output file path
        fmt: Output format, defaults to the file's own format
    """
    text = serialize_subtitle(subtitle, fmt)
    if not text.endswith("\n"):
        text += "\n"

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")

    logger.info(f"Saved {len(subtitle)} entries to {path}")


def translated_filename(
    filename: str,
    target_language: str,
    fmt: Optional[SubtitleFormat] = None,
) -> str:
    """
    Build the output name for a translated file, e.g. ``movie_zh-CN.srt``.

    When ``fmt`` is given the extension is replaced by that format's.
    """
    path = Path(filename)
    suffix = SubtitleFormat(fmt).extension if fmt else path.suffix
    return f"{path.stem}_{target_language}{suffix}"


def ensure_format(value: str) -> SubtitleFormat:
    """Convert a user supplied format name (``srt``, ``.vtt``, ``ssa``...) to a SubtitleFormat."""
    key = value.lower().lstrip(".")
    if key == "ssa":
        key = "ass"
    try:
        return SubtitleFormat(key)
    except ValueError:
        raise SubtitleFormatError(f"Unsupported output format: {value}") from None
