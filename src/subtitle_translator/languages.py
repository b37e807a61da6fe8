"""Supported languages and display names used in prompts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

AUTO_DETECT = "auto"


@dataclass(frozen=True)
class Language:
    code: str
    name: str
    native_name: str


SUPPORTED_LANGUAGES: List[Language] = [
    Language("zh-CN", "Simplified Chinese", "中文（简体）"),
    Language("zh-TW", "Traditional Chinese", "中文（繁體）"),
    Language("en", "English", "English"),
    Language("ja", "Japanese", "日本語"),
    Language("ko", "Korean", "한국어"),
    Language("fr", "French", "Français"),
    Language("de", "German", "Deutsch"),
    Language("es", "Spanish", "Español"),
    Language("it", "Italian", "Italiano"),
    Language("pt", "Portuguese", "Português"),
    Language("ru", "Russian", "Русский"),
    Language("ar", "Arabic", "العربية"),
    Language("hi", "Hindi", "हिन्दी"),
    Language("th", "Thai", "ไทย"),
    Language("vi", "Vietnamese", "Tiếng Việt"),
    Language("tr", "Turkish", "Türkçe"),
    Language("pl", "Polish", "Polski"),
    Language("nl", "Dutch", "Nederlands"),
    Language("sv", "Swedish", "Svenska"),
    Language("da", "Danish", "Dansk"),
    Language("no", "Norwegian", "Norsk"),
    Language("fi", "Finnish", "Suomi"),
]

_BY_CODE: Dict[str, Language] = {lang.code.lower(): lang for lang in SUPPORTED_LANGUAGES}


def get_language(code: str) -> Optional[Language]:
    return _BY_CODE.get(code.lower()) if code else None


def is_language_supported(code: str, allow_auto: bool = False) -> bool:
    if allow_auto and code == AUTO_DETECT:
        return True
    return get_language(code) is not None


def language_display_name(code: str) -> str:
    """Name used in prompts, e.g. ``Japanese (日本語)``; unknown codes are returned as-is."""
    if code == AUTO_DETECT:
        return "the detected source language"
    lang = get_language(code)
    if lang is None:
        return code
    if lang.name == lang.native_name:
        return lang.name
    return f"{lang.name} ({lang.native_name})"
