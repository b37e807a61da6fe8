"""
Subtitle Translator - Async LLM-powered translator for SRT, VTT and ASS subtitles.

Features:
- Parsing and export of SRT, WebVTT and ASS/SSA files
- Format detection by file name and content
- Context-aware translation through any OpenAI-compatible backend
- Bounded concurrency with batches and request delays
- Pause, resume and cancel of running translations
- Per-entry error tolerance with fallback to the source text
"""

__version__ = "1.2.0"
__author__ = "wjin999"

from .models import (
    SubtitleEntry,
    SubtitleFile,
    SubtitleFormat,
    ConcurrencySettings,
    TranslationRequest,
    TranslationResponse,
    TranslationStatus,
    TranslationQuality,
)
from .errors import (
    SubtitleTranslatorError,
    SubtitleFormatError,
    UnsupportedFormatError,
    ConfigurationError,
    TranslationCancelled,
)
from .detector import detect_by_name, detect_by_content, detect_format
from .parser import (
    parse_subtitle,
    serialize_subtitle,
    load_subtitle,
    save_subtitle,
    validate_subtitle_file,
    translated_filename,
)
from .srt import parse_srt, serialize_srt
from .vtt import parse_vtt, serialize_vtt
from .ass import parse_ass, serialize_ass
from .capability import TranslationCapability, OpenAICompatibleTranslator, create_translator
from .config import TranslatorConfig, LLMSettings, LLMProvider
from .orchestrator import TranslationOrchestrator
from .progress import TranslationProgress, TranslationObserver, ProgressReporter

__all__ = [
    # Models
    "SubtitleEntry",
    "SubtitleFile",
    "SubtitleFormat",
    "ConcurrencySettings",
    "TranslationRequest",
    "TranslationResponse",
    "TranslationStatus",
    "TranslationQuality",
    "TranslationProgress",
    "TranslatorConfig",
    "LLMSettings",
    "LLMProvider",
    # Errors
    "SubtitleTranslatorError",
    "SubtitleFormatError",
    "UnsupportedFormatError",
    "ConfigurationError",
    "TranslationCancelled",
    # Formats
    "detect_by_name",
    "detect_by_content",
    "detect_format",
    "parse_subtitle",
    "serialize_subtitle",
    "load_subtitle",
    "save_subtitle",
    "validate_subtitle_file",
    "translated_filename",
    "parse_srt",
    "serialize_srt",
    "parse_vtt",
    "serialize_vtt",
    "parse_ass",
    "serialize_ass",
    # Translation
    "TranslationCapability",
    "OpenAICompatibleTranslator",
    "create_translator",
    "TranslationOrchestrator",
    "TranslationObserver",
    "ProgressReporter",
]
