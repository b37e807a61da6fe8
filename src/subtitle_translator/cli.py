"""Command-line interface for Subtitle Translator."""

from __future__ import annotations

import asyncio
import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from .capability import TranslationCapability, create_translator
from .config import OUTPUT_FORMATS, LLMProvider, TranslatorConfig
from .detector import detect_by_name
from .errors import ConfigurationError, SubtitleFormatError, TranslationCancelled
from .models import CONCURRENCY_MODES, SubtitleFormat, TranslationQuality
from .orchestrator import TranslationOrchestrator
from .parser import (
    ensure_format,
    load_subtitle,
    save_subtitle,
    translated_filename,
    validate_subtitle_file,
)
from .progress import (
    ProgressReporter,
    TqdmProgressObserver,
    TranslationObserver,
    TranslationProgress,
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )
    # keep request logs from the HTTP stack out of the progress bar
    logging.getLogger("httpx").setLevel(logging.WARNING)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Translate SRT, VTT and ASS subtitles with an LLM backend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s movie.srt -t zh-CN                  # Translate to Simplified Chinese
  %(prog)s movie.ass -t ja --to srt            # Translate and convert to SRT
  %(prog)s a.srt b.vtt -t de --mode high       # Batch, high concurrency preset
  %(prog)s movie.srt --provider local --base-url http://localhost:11434/v1 --model qwen2.5:72b
  %(prog)s movie.vtt --to srt --dry-run        # Convert only, no translation
        """
    )

    # Positional arguments
    parser.add_argument("input_paths", nargs="+", help="Input subtitle file(s)")
    parser.add_argument("-o", "--output", dest="output_path",
                        help="Output file (single input) or directory (multiple inputs)")
    parser.add_argument("--to", dest="output_format", choices=sorted(OUTPUT_FORMATS),
                        help="Output format (default: same as input)")

    # Languages
    parser.add_argument("-s", "--source", dest="source_language", default="auto",
                        help="Source language code (default: auto)")
    parser.add_argument("-t", "--target", dest="target_language", default="zh-CN",
                        help="Target language code (default: zh-CN)")

    # API options
    parser.add_argument("--provider", choices=[p.value for p in LLMProvider],
                        help="LLM backend (default: openai or $SUBTITLE_TRANSLATOR_PROVIDER)")
    parser.add_argument("--api-key", help="API key (or set SUBTITLE_TRANSLATOR_API_KEY)")
    parser.add_argument("--base-url", help="API base URL")
    parser.add_argument("--model", dest="model_name", help="Model name")
    parser.add_argument("--temperature", type=float, default=None)
    parser.add_argument("--max-tokens", type=int, default=1000)
    parser.add_argument("--timeout", type=float, default=60.0, help="Request timeout in seconds")
    parser.add_argument("--quality", choices=[q.value for q in TranslationQuality], default="standard")
    parser.add_argument("--validate", action="store_true",
                        help="Probe the backend before translating")

    # Performance
    parser.add_argument("--mode", choices=CONCURRENCY_MODES, default="medium",
                        help="Concurrency preset (default: medium)")
    parser.add_argument("--max-concurrent", type=int, default=None, help="Max concurrent requests")
    parser.add_argument("--batch-size", type=int, default=None, help="Entries per batch")
    parser.add_argument("--delay", dest="delay_ms", type=int, default=None,
                        help="Delay between requests/batches in ms")

    # Misc
    parser.add_argument("--dry-run", action="store_true",
                        help="Parse and export without translating")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    return parser.parse_args(argv)


def resolve_output_path(
    in_path: Path,
    output: Optional[str],
    target_language: str,
    fmt: SubtitleFormat,
    multiple: bool,
) -> Path:
    """Output file for ``in_path``; ``output`` is a directory when several inputs are given."""
    name = translated_filename(in_path.name, target_language, fmt)
    if not output:
        return in_path.with_name(name)
    out = Path(output).expanduser()
    if multiple or out.is_dir():
        return out / name
    return out


class ErrorCollector(TranslationObserver):
    """Keeps the error list of the latest progress snapshot."""

    def __init__(self) -> None:
        self.errors: List[str] = []

    def on_progress(self, progress: TranslationProgress) -> None:
        self.errors = progress.errors


def _install_cancel_handler(orchestrator: TranslationOrchestrator) -> bool:
    """Route Ctrl+C to a cooperative cancel. Returns False where signals are unsupported."""
    try:
        asyncio.get_running_loop().add_signal_handler(signal.SIGINT, orchestrator.cancel)
    except (NotImplementedError, RuntimeError):
        return False
    return True


def _remove_cancel_handler() -> None:
    try:
        asyncio.get_running_loop().remove_signal_handler(signal.SIGINT)
    except (NotImplementedError, RuntimeError):
        pass


async def translate_one(
    in_path: Path,
    out_path: Path,
    out_format: Optional[SubtitleFormat],
    config: TranslatorConfig,
    capability: Optional[TranslationCapability],
    dry_run: bool = False,
) -> int:
    """
    Translate a single file.

    Returns:
        Number of entries that failed to translate
    """
    logger.info(f"Reading: {in_path}")
    subtitle = load_subtitle(in_path)

    if not subtitle.entries:
        raise SubtitleFormatError(f"No valid subtitle entries found in {in_path.name}")

    logger.info(f"Parsed {len(subtitle)} {subtitle.format.value.upper()} entries")

    if dry_run or capability is None:
        save_subtitle(subtitle, out_path, out_format)
        return 0

    reporter = ProgressReporter()
    bar = TqdmProgressObserver(desc=in_path.name)
    reporter.subscribe(bar)

    collector = ErrorCollector()
    reporter.subscribe(collector)

    orchestrator = TranslationOrchestrator(capability, config.concurrency_settings(), reporter)
    handler_installed = _install_cancel_handler(orchestrator)
    try:
        translated = await orchestrator.translate_file(
            subtitle, config.source_language, config.target_language
        )
    finally:
        if handler_installed:
            _remove_cancel_handler()
        bar.close()
        reporter.close()

    for message in collector.errors:
        logger.warning(f"Kept original text for {message}")

    save_subtitle(translated, out_path, out_format)
    return len(collector.errors)


async def main_async(args: argparse.Namespace) -> int:
    """Main async workflow."""
    config = TranslatorConfig.from_args(args)

    if not args.dry_run:
        # 验证配置
        error = config.validate()
        if error:
            logger.error(error)
            return 1

    out_format = ensure_format(args.output_format) if args.output_format else None

    # 验证输入文件
    in_paths = [Path(p).expanduser().resolve() for p in args.input_paths]
    for in_path in in_paths:
        error = validate_subtitle_file(in_path)
        if error:
            logger.error(f"{in_path.name}: {error}")
            return 1

    capability = None
    if not args.dry_run:
        capability = create_translator(config.llm_settings())
        if not capability.is_configured():
            logger.error("Translation backend is not configured")
            return 1
        if args.validate:
            logger.info(f"Validating {config.provider.value} backend ({config.model_name})...")
            if not await capability.validate_config():
                logger.error("Backend validation failed, check API key, endpoint and model")
                return 1

    multiple = len(in_paths) > 1
    total_errors = 0

    # 逐个文件处理
    for in_path in in_paths:
        fmt = out_format
        if fmt is None:
            fmt = detect_by_name(in_path.name)
        out_path = resolve_output_path(
            in_path, args.output_path, config.target_language, fmt, multiple
        )

        try:
            total_errors += await translate_one(
                in_path, out_path, out_format, config, capability, args.dry_run
            )
        except SubtitleFormatError as e:
            logger.error(f"{in_path.name}: {e}")
            return 1
        except ConfigurationError as e:
            logger.error(str(e))
            return 1

    if total_errors:
        logger.warning(f"Done with {total_errors} entr{'y' if total_errors == 1 else 'ies'} left untranslated")
    else:
        logger.info(f"Done! {len(in_paths)} file(s) processed")

    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    try:
        exit_code = asyncio.run(main_async(args))
        sys.exit(exit_code)
    except (KeyboardInterrupt, TranslationCancelled):
        print("\nCancelled by user. No output written for the current file.")
        sys.exit(130)
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
