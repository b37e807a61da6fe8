"""Tests for subtitle format detection."""

import pytest

from subtitle_translator.detector import detect_by_content, detect_by_name, detect_format
from subtitle_translator.errors import UnsupportedFormatError
from subtitle_translator.models import SubtitleFormat


class TestDetectByName:

    @pytest.mark.parametrize("name, expected", [
        ("movie.srt", SubtitleFormat.SRT),
        ("MOVIE.SRT", SubtitleFormat.SRT),
        ("talk.vtt", SubtitleFormat.VTT),
        ("anime.ass", SubtitleFormat.ASS),
        ("old.ssa", SubtitleFormat.ASS),
        ("dir.with.dots/episode.en.srt", SubtitleFormat.SRT),
    ])
    def test_known_extensions(self, name, expected):
        assert detect_by_name(name) == expected

    @pytest.mark.parametrize("name", ["notes.txt", "movie", "", "srt"])
    def test_unknown(self, name):
        assert detect_by_name(name) is None


class TestDetectByContent:

    def test_vtt(self):
        assert detect_by_content("WEBVTT\n\n00:00:01.000 --> 00:00:02.000\nHi") == SubtitleFormat.VTT

    def test_vtt_with_bom(self):
        assert detect_by_content("\ufeffWEBVTT\n") == SubtitleFormat.VTT

    @pytest.mark.parametrize("marker", ["[Script Info]", "[V4+ Styles]"])
    def test_ass(self, marker):
        assert detect_by_content(f"{marker}\nTitle: x\n") == SubtitleFormat.ASS

    def test_srt(self):
        content = "1\n00:00:01,000 --> 00:00:02,000\nHello\n"
        assert detect_by_content(content) == SubtitleFormat.SRT

    def test_srt_with_crlf(self):
        content = "1\r\n00:00:01,000 --> 00:00:02,000\r\nHello\r\n"
        assert detect_by_content(content) == SubtitleFormat.SRT

    def test_vtt_checked_before_ass(self):
        assert detect_by_content("WEBVTT\n\nNOTE [Script Info]\n") == SubtitleFormat.VTT

    @pytest.mark.parametrize("content", ["", "hello world", "00:00:01,000 --> 00:00:02,000"])
    def test_unrecognized(self, content):
        assert detect_by_content(content) is None


class TestDetectFormat:

    def test_name_wins_over_content(self):
        assert detect_format("movie.srt", "WEBVTT\n") == SubtitleFormat.SRT

    def test_falls_back_to_content(self):
        assert detect_format("upload.txt", "[Script Info]\n") == SubtitleFormat.ASS

    def test_raises_when_unknown(self):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            detect_format("upload.txt", "plain text")
        assert "not recognized" in str(exc_info.value)
