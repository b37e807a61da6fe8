"""Tests for WebVTT parsing and serialization."""

import pytest

from subtitle_translator.errors import SubtitleFormatError
from subtitle_translator.models import SubtitleFormat
from subtitle_translator.vtt import format_timestamp, parse_vtt, serialize_vtt


SAMPLE_VTT = """WEBVTT

00:00:01.000 --> 00:00:02.500
Hello

00:00:03.000 --> 00:00:04.000
Two
lines
"""


class TestParseVtt:

    def test_parse_simple(self):
        subtitle = parse_vtt(SAMPLE_VTT, "sample.vtt")
        assert subtitle.format == SubtitleFormat.VTT
        assert len(subtitle.entries) == 2
        assert subtitle.entries[0].start_time == 1000
        assert subtitle.entries[0].end_time == 2500
        assert subtitle.entries[1].text == "Two\nlines"

    def test_ids_are_assigned_in_order(self):
        subtitle = parse_vtt(SAMPLE_VTT)
        assert [e.id for e in subtitle.entries] == [1, 2]

    def test_missing_header(self):
        with pytest.raises(SubtitleFormatError):
            parse_vtt("00:00:01.000 --> 00:00:02.000\nHello")

    def test_header_must_be_first_non_blank_line(self):
        with pytest.raises(SubtitleFormatError):
            parse_vtt("NOTE hi\nWEBVTT\n\n00:00:01.000 --> 00:00:02.000\nHello")

    def test_header_with_description_and_leading_blank_lines(self):
        content = "\n\nWEBVTT - Movie title\n\n00:00:01.000 --> 00:00:02.000\nHello"
        assert len(parse_vtt(content).entries) == 1

    def test_header_prefix_is_not_enough(self):
        with pytest.raises(SubtitleFormatError):
            parse_vtt("WEBVTTX\n\n00:00:01.000 --> 00:00:02.000\nHello")

    def test_note_style_region_are_ignored(self):
        content = """WEBVTT

NOTE This is a comment
that spans two lines

STYLE
::cue { color: yellow }

REGION
id:fred width:40%

intro
00:00:01.000 --> 00:00:02.000 align:start position:10%
Hello
"""
        subtitle = parse_vtt(content)
        assert len(subtitle.entries) == 1
        assert subtitle.entries[0].text == "Hello"

    def test_cue_without_text_is_discarded(self):
        content = "WEBVTT\n\n00:00:01.000 --> 00:00:02.000\n\n00:00:03.000 --> 00:00:04.000\nKept"
        subtitle = parse_vtt(content)
        assert [e.text for e in subtitle.entries] == ["Kept"]
        assert subtitle.entries[0].id == 1

    def test_hours_are_optional(self):
        content = "WEBVTT\n\n01:02.500 --> 01:04.000\nShort form"
        entry = parse_vtt(content).entries[0]
        assert entry.start_time == 62500
        assert entry.end_time == 64000

    def test_crlf(self):
        content = "WEBVTT\r\n\r\n00:00:01.000 --> 00:00:02.000\r\nHello\r\n"
        assert parse_vtt(content).entries[0].text == "Hello"


class TestSerializeVtt:

    def test_format_timestamp(self):
        assert format_timestamp(3723004) == "01:02:03.004"

    def test_serialize(self):
        subtitle = parse_vtt(SAMPLE_VTT)
        subtitle.entries[0].translated_text = "Hallo"
        assert serialize_vtt(subtitle) == (
            "WEBVTT\n\n"
            "00:00:01.000 --> 00:00:02.500\nHallo\n\n"
            "00:00:03.000 --> 00:00:04.000\nTwo\nlines"
        )

    def test_round_trip(self):
        original = parse_vtt(SAMPLE_VTT)
        reparsed = parse_vtt(serialize_vtt(original))
        assert [(e.start_time, e.end_time, e.text) for e in reparsed.entries] == \
            [(e.start_time, e.end_time, e.text) for e in original.entries]
