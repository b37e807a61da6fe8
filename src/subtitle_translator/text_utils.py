"""Text processing utilities."""

from __future__ import annotations

import re

BOM = "\ufeff"

# Formatting marks models sometimes wrap their answer in
_WRAPPING_QUOTES = ('"', "“", "”", "「", "」")

PREVIEW_LENGTH = 50


def normalize_content(content: str) -> str:
    """Strip a leading BOM and normalize line endings to ``\\n``."""
    if not content:
        return ""
    if content.startswith(BOM):
        content = content[1:]
    return content.replace("\r\n", "\n").replace("\r", "\n")


def truncate_text(text: str, max_length: int = PREVIEW_LENGTH, suffix: str = "...") -> str:
    """
    Truncate text to ``max_length`` characters, appending ``suffix`` when cut.

    Args:
        text: Text to truncate
        max_length: Number of characters kept from the original text
        suffix: Suffix to append if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length] + suffix


def clean_translated_text(text: str) -> str:
    """
    Clean up raw model output for use as subtitle text.

    Only wrapping artifacts are removed; line breaks inside the text
    are kept since they are significant in subtitles.
    """
    if not text or not isinstance(text, str):
        return ""

    text = text.strip()

    # 1. 移除 markdown 代码块
    text = re.sub(r'^```[a-zA-Z]*\s*', '', text)
    text = re.sub(r'\s*```$', '', text)

    # 2. 移除 "Translation:" 之类的前缀
    text = re.sub(r'^(?:translation|translated text|译文)\s*[:：]\s*', '', text, flags=re.IGNORECASE)

    # 3. 移除整体包裹的引号
    if len(text) >= 2 and text[0] in _WRAPPING_QUOTES and text[-1] in _WRAPPING_QUOTES:
        inner = text[1:-1]
        if not any(q in inner for q in _WRAPPING_QUOTES):
            text = inner

    # 4. 逐行标准化空格
    lines = [re.sub(r'[ \t]+', ' ', line).strip() for line in text.split('\n')]
    return '\n'.join(line for line in lines if line)


def validate_translation(original: str, translated: str) -> tuple[bool, str]:
    """
    Check that a translation is usable.

    Args:
        original: Original text
        translated: Translated text

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not translated:
        return False, "Empty translation"

    if translated.startswith("[Fail]"):
        return False, "Translation failed"

    # 检查是否全是乱码/特殊字符
    clean = re.sub(r'[\s\W]', '', translated)
    if not clean and re.sub(r'[\s\W]', '', original):
        return False, "Translation contains only special characters"

    # 检查长度异常（译文不应比原文长太多）
    orig_len = len(original)
    if orig_len > 10 and len(translated) > orig_len * 10:
        return False, f"Translation too long ({len(translated)} vs {orig_len})"

    return True, ""


def estimate_confidence(original: str, translated: str, base: float = 0.9) -> float:
    """
    Coarse confidence for a translation.

    Starts from a backend-specific ``base`` and is lowered when the output
    is a verbatim copy of the source or its length is far off.
    """
    if not translated:
        return 0.0

    score = base
    if translated.strip().lower() == original.strip().lower():
        score -= 0.4

    orig_len = len(original)
    if orig_len > 10:
        ratio = len(translated) / orig_len
        if ratio < 0.1 or ratio > 5:
            score -= 0.2

    return round(max(score, 0.0), 2)
