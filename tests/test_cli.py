"""Tests for the command-line interface."""

import asyncio
from pathlib import Path

import pytest

from subtitle_translator import cli
from subtitle_translator.config import TranslatorConfig
from subtitle_translator.errors import TranslationCancelled
from subtitle_translator.models import SubtitleFormat, TranslationResponse

SAMPLE_SRT = "1\n00:00:01,000 --> 00:00:02,500\nHello\n\n2\n00:00:03,000 --> 00:00:04,000\nWorld\n"


class UpperCapability:

    def is_configured(self):
        return True

    async def validate_config(self):
        return True

    async def translate(self, request):
        if request.text == "World":
            return TranslationResponse.failure("quota exceeded")
        return TranslationResponse(translated_text=request.text.upper())


def run_main(argv):
    return asyncio.run(cli.main_async(cli.parse_arguments(argv)))


class TestParseArguments:

    def test_defaults(self):
        args = cli.parse_arguments(["movie.srt"])
        assert args.input_paths == ["movie.srt"]
        assert args.source_language == "auto"
        assert args.target_language == "zh-CN"
        assert args.mode == "medium"
        assert args.output_format is None
        assert not args.dry_run

    def test_options(self):
        args = cli.parse_arguments([
            "a.srt", "b.vtt", "-t", "ja", "--to", "ass", "--mode", "custom",
            "--max-concurrent", "4", "--batch-size", "10", "--delay", "0",
            "--provider", "local", "--model", "qwen",
        ])
        assert args.input_paths == ["a.srt", "b.vtt"]
        assert args.output_format == "ass"
        assert (args.max_concurrent, args.batch_size, args.delay_ms) == (4, 10, 0)
        assert args.model_name == "qwen"

    def test_invalid_mode(self):
        with pytest.raises(SystemExit):
            cli.parse_arguments(["a.srt", "--mode", "turbo"])


class TestResolveOutputPath:

    def test_next_to_input(self):
        path = cli.resolve_output_path(Path("/data/movie.srt"), None, "ja", SubtitleFormat.SRT, False)
        assert path == Path("/data/movie_ja.srt")

    def test_format_changes_extension(self):
        path = cli.resolve_output_path(Path("/data/movie.ass"), None, "ja", SubtitleFormat.VTT, False)
        assert path == Path("/data/movie_ja.vtt")

    def test_explicit_file(self, tmp_path):
        target = tmp_path / "out.srt"
        path = cli.resolve_output_path(Path("/data/movie.srt"), str(target), "ja", SubtitleFormat.SRT, False)
        assert path == target

    def test_directory_for_multiple_inputs(self, tmp_path):
        path = cli.resolve_output_path(Path("/data/movie.srt"), str(tmp_path), "de", SubtitleFormat.SRT, True)
        assert path == tmp_path / "movie_de.srt"


class TestMainAsync:

    def test_dry_run_converts_format(self, tmp_path):
        src = tmp_path / "movie.srt"
        src.write_text(SAMPLE_SRT, encoding="utf-8")

        assert run_main([str(src), "--dry-run", "--to", "vtt", "-t", "fr"]) == 0

        out = tmp_path / "movie_fr.vtt"
        assert out.read_text(encoding="utf-8").startswith("WEBVTT\n\n00:00:01.000 --> 00:00:02.500\nHello")

    def test_translates_with_fallback(self, tmp_path, monkeypatch):
        monkeypatch.setattr(cli, "create_translator", lambda settings: UpperCapability())
        src = tmp_path / "movie.srt"
        src.write_text(SAMPLE_SRT, encoding="utf-8")

        code = run_main([str(src), "--api-key", "sk-test", "-t", "ja", "--mode", "custom", "--delay", "0"])

        assert code == 0
        text = (tmp_path / "movie_ja.srt").read_text(encoding="utf-8")
        assert "HELLO" in text
        assert "World" in text

    def test_missing_file(self, tmp_path):
        assert run_main([str(tmp_path / "missing.srt"), "--dry-run"]) == 1

    def test_invalid_config(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SUBTITLE_TRANSLATOR_API_KEY", raising=False)
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.delenv("SUBTITLE_TRANSLATOR_PROVIDER", raising=False)
        src = tmp_path / "movie.srt"
        src.write_text(SAMPLE_SRT, encoding="utf-8")
        assert run_main([str(src)]) == 1

    def test_file_without_entries(self, tmp_path):
        src = tmp_path / "broken.srt"
        src.write_text("not a subtitle\n", encoding="utf-8")
        assert run_main([str(src), "--dry-run"]) == 1


class TestCancellation:

    @pytest.fixture
    def cancelling(self, monkeypatch):
        """Capability that cancels its own run while translating the first entry."""
        orchestrators = []

        def capture(orchestrator):
            orchestrators.append(orchestrator)
            return False

        class CancellingCapability(UpperCapability):
            async def translate(self, request):
                orchestrators[-1].cancel()
                return await super().translate(request)

        monkeypatch.setattr(cli, "_install_cancel_handler", capture)
        monkeypatch.setattr(cli, "create_translator", lambda settings: CancellingCapability())
        return CancellingCapability()

    def test_translate_one_writes_nothing(self, tmp_path, cancelling):
        src = tmp_path / "movie.srt"
        src.write_text(SAMPLE_SRT, encoding="utf-8")
        out = tmp_path / "movie_ja.srt"
        config = TranslatorConfig(
            api_key="sk-test", target_language="ja",
            concurrency_mode="custom", max_concurrent=1, delay_ms=0,
        )

        with pytest.raises(TranslationCancelled):
            asyncio.run(cli.translate_one(src, out, None, config, cancelling))

        assert not out.exists()

    def test_main_exits_130(self, tmp_path, cancelling):
        src = tmp_path / "movie.srt"
        src.write_text(SAMPLE_SRT, encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            cli.main([str(src), "--api-key", "sk-test", "-t", "ja", "--mode", "custom", "--max-concurrent", "1", "--delay", "0"])

        assert exc_info.value.code == 130
        assert not (tmp_path / "movie_ja.srt").exists()
