"""Tests for text utilities."""

import pytest
from subtitle_translator.text_utils import (
    clean_translated_text,
    estimate_confidence,
    normalize_content,
    truncate_text,
    validate_translation,
)


class TestNormalizeContent:

    def test_strips_bom_and_line_endings(self):
        assert normalize_content("\ufeffa\r\nb\rc") == "a\nb\nc"

    def test_empty(self):
        assert normalize_content("") == ""


class TestTruncateText:

    def test_short_text_unchanged(self):
        assert truncate_text("short") == "short"

    def test_long_text(self):
        text = "x" * 60
        assert truncate_text(text) == "x" * 50 + "..."


class TestCleanTranslatedText:

    def test_remove_code_fence(self):
        assert clean_translated_text("```\n你好\n```") == "你好"

    def test_remove_prefix(self):
        assert clean_translated_text("Translation: Hola") == "Hola"

    def test_remove_wrapping_quotes(self):
        assert clean_translated_text('"你好，世界"') == "你好，世界"
        assert clean_translated_text("「こんにちは」") == "こんにちは"

    def test_inner_quotes_kept(self):
        text = '"A" and "B"'
        assert clean_translated_text(text) == text

    def test_preserve_line_breaks(self):
        assert clean_translated_text("第一行\n  第二行  ") == "第一行\n第二行"

    def test_normalize_whitespace(self):
        assert clean_translated_text("  hello   world  ") == "hello world"

    def test_empty_input(self):
        assert clean_translated_text("") == ""
        assert clean_translated_text(None) == ""


class TestValidateTranslation:

    def test_valid(self):
        is_valid, error = validate_translation("Hello world", "你好世界")
        assert is_valid
        assert error == ""

    def test_empty(self):
        is_valid, error = validate_translation("Hello", "")
        assert not is_valid
        assert "Empty" in error

    def test_fail_marker(self):
        is_valid, error = validate_translation("Hello", "[Fail] Hello")
        assert not is_valid
        assert "failed" in error

    def test_only_special_characters(self):
        is_valid, error = validate_translation("Hello there", "?!...")
        assert not is_valid
        assert "special characters" in error

    def test_punctuation_source_may_stay_punctuation(self):
        is_valid, _ = validate_translation("...", "……")
        assert is_valid

    def test_too_long(self):
        is_valid, error = validate_translation("Short sentence", "x" * 500)
        assert not is_valid
        assert "too long" in error

    def test_identical_is_allowed(self):
        # names and numbers often stay the same
        is_valid, _ = validate_translation("Tokyo", "Tokyo")
        assert is_valid


class TestEstimateConfidence:

    def test_base(self):
        assert estimate_confidence("Hello world", "你好世界") == pytest.approx(0.9)

    def test_identical_lowers_confidence(self):
        assert estimate_confidence("Hello", "hello") < 0.9

    def test_empty(self):
        assert estimate_confidence("Hello", "") == 0.0
