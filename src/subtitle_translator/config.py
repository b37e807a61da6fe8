"""Configuration and constants."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from dotenv import load_dotenv

from .languages import is_language_supported
from .models import (
    CONCURRENCY_MODES,
    ConcurrencySettings,
    SubtitleFormat,
    TranslationQuality,
)

# Load environment variables once
load_dotenv()

ENV_PREFIX = "SUBTITLE_TRANSLATOR_"


class LLMProvider(str, Enum):
    """Backends reachable through an OpenAI-compatible chat API."""

    OPENAI = "openai"
    CLAUDE = "claude"
    GEMINI = "gemini"
    DEEPSEEK = "deepseek"
    CUSTOM_OPENAI = "custom-openai"
    LOCAL = "local"


DEFAULT_MODELS: Dict[LLMProvider, str] = {
    LLMProvider.OPENAI: "gpt-4o-mini",
    LLMProvider.CLAUDE: "claude-3-5-haiku-20241022",
    LLMProvider.GEMINI: "gemini-2.0-flash",
    LLMProvider.DEEPSEEK: "deepseek-chat",
    LLMProvider.CUSTOM_OPENAI: "deepseek-v3",
    LLMProvider.LOCAL: "llama3.3:70b",
}

DEFAULT_BASE_URLS: Dict[LLMProvider, Optional[str]] = {
    LLMProvider.OPENAI: "https://api.openai.com/v1",
    LLMProvider.CLAUDE: "https://api.anthropic.com/v1/",
    LLMProvider.GEMINI: "https://generativelanguage.googleapis.com/v1beta/openai/",
    LLMProvider.DEEPSEEK: "https://api.deepseek.com",
    LLMProvider.CUSTOM_OPENAI: None,
    LLMProvider.LOCAL: "http://localhost:11434/v1",
}

# Provider specific API key variables, checked after SUBTITLE_TRANSLATOR_API_KEY
PROVIDER_KEY_ENV: Dict[LLMProvider, str] = {
    LLMProvider.OPENAI: "OPENAI_API_KEY",
    LLMProvider.CLAUDE: "ANTHROPIC_API_KEY",
    LLMProvider.GEMINI: "GEMINI_API_KEY",
    LLMProvider.DEEPSEEK: "DEEPSEEK_API_KEY",
    LLMProvider.CUSTOM_OPENAI: "CUSTOM_OPENAI_API_KEY",
    LLMProvider.LOCAL: "LOCAL_LLM_API_KEY",
}

MAX_CONCURRENT_LIMIT = 10
MAX_BATCH_SIZE = 50


@dataclass
class LLMSettings:
    """Connection and sampling settings handed to a backend adapter."""

    provider: LLMProvider
    model: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = 1000
    timeout: float = 60.0
    max_retries: int = 3
    quality: TranslationQuality = TranslationQuality.STANDARD

    def __post_init__(self):
        self.provider = LLMProvider(self.provider)
        self.quality = TranslationQuality(self.quality)


@dataclass
class TranslatorConfig:
    """Configuration for subtitle translator."""

    # API settings
    provider: LLMProvider = LLMProvider.OPENAI
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model_name: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = 1000
    timeout: float = 60.0
    max_retries: int = 3
    quality: TranslationQuality = TranslationQuality.STANDARD

    # Languages
    source_language: str = "auto"
    target_language: str = "zh-CN"

    # Concurrency settings
    concurrency_mode: str = "medium"
    max_concurrent: Optional[int] = None
    batch_size: Optional[int] = None
    delay_ms: Optional[int] = None

    # Output settings
    output_format: Optional[str] = None

    def __post_init__(self):
        """Fill unset connection values from the environment and provider defaults."""
        self.provider = LLMProvider(self.provider)
        self.quality = TranslationQuality(self.quality)

        if self.api_key is None:
            self.api_key = (
                os.environ.get(f"{ENV_PREFIX}API_KEY")
                or os.environ.get(PROVIDER_KEY_ENV[self.provider])
            )
        if self.base_url is None:
            self.base_url = (
                os.environ.get(f"{ENV_PREFIX}BASE_URL")
                or DEFAULT_BASE_URLS[self.provider]
            )
        if self.model_name is None:
            self.model_name = (
                os.environ.get(f"{ENV_PREFIX}MODEL")
                or DEFAULT_MODELS[self.provider]
            )

    @classmethod
    def from_args(cls, args) -> "TranslatorConfig":
        """Create config from argparse namespace."""
        return cls(
            provider=getattr(args, 'provider', None) or os.environ.get(f"{ENV_PREFIX}PROVIDER", "openai"),
            api_key=getattr(args, 'api_key', None),
            base_url=getattr(args, 'base_url', None),
            model_name=getattr(args, 'model_name', None),
            temperature=getattr(args, 'temperature', None),
            max_tokens=getattr(args, 'max_tokens', 1000),
            timeout=getattr(args, 'timeout', 60.0),
            quality=getattr(args, 'quality', "standard"),
            source_language=getattr(args, 'source_language', "auto"),
            target_language=getattr(args, 'target_language', "zh-CN"),
            concurrency_mode=getattr(args, 'mode', "medium"),
            max_concurrent=getattr(args, 'max_concurrent', None),
            batch_size=getattr(args, 'batch_size', None),
            delay_ms=getattr(args, 'delay_ms', None),
            output_format=getattr(args, 'output_format', None),
        )

    def concurrency_settings(self) -> ConcurrencySettings:
        """
        Build scheduling settings: start from the preset of ``concurrency_mode``
        and apply any explicit overrides, which turns the mode into ``custom``.
        """
        preset_mode = self.concurrency_mode if self.concurrency_mode != "custom" else "medium"
        preset = ConcurrencySettings.from_mode(preset_mode)

        overrides = (self.max_concurrent, self.batch_size, self.delay_ms)
        if self.concurrency_mode != "custom" and all(v is None for v in overrides):
            return preset

        return ConcurrencySettings(
            max_concurrent=self.max_concurrent if self.max_concurrent is not None else preset.max_concurrent,
            batch_size=self.batch_size if self.batch_size is not None else preset.batch_size,
            delay_between_requests=self.delay_ms if self.delay_ms is not None else preset.delay_between_requests,
            mode="custom",
        )

    def llm_settings(self) -> LLMSettings:
        return LLMSettings(
            provider=self.provider,
            model=self.model_name or "",
            api_key=self.api_key,
            base_url=self.base_url,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout=self.timeout,
            max_retries=self.max_retries,
            quality=self.quality,
        )

    def validate(self) -> Optional[str]:
        """
        Validate configuration.

        Returns:
            Error message if invalid, None if valid
        """
        if not self.api_key and self.provider != LLMProvider.LOCAL:
            return (
                f"API key is required for provider '{self.provider.value}'. "
                f"Set {ENV_PREFIX}API_KEY, {PROVIDER_KEY_ENV[self.provider]} or use --api-key"
            )

        if not self.base_url and self.provider in (LLMProvider.CUSTOM_OPENAI, LLMProvider.LOCAL):
            return f"Base URL is required for provider '{self.provider.value}'. Use --base-url"

        if not self.model_name:
            return "Model name is required. Use --model"

        if self.concurrency_mode not in CONCURRENCY_MODES:
            return f"Unknown concurrency mode: {self.concurrency_mode}"

        if self.max_concurrent is not None and not 1 <= self.max_concurrent <= MAX_CONCURRENT_LIMIT:
            return f"Max concurrent must be 1-{MAX_CONCURRENT_LIMIT}, got {self.max_concurrent}"

        if self.batch_size is not None and not 1 <= self.batch_size <= MAX_BATCH_SIZE:
            return f"Batch size must be 1-{MAX_BATCH_SIZE}, got {self.batch_size}"

        if self.delay_ms is not None and self.delay_ms < 0:
            return f"Delay must be >= 0 ms, got {self.delay_ms}"

        if not is_language_supported(self.source_language, allow_auto=True):
            return f"Unsupported source language: {self.source_language}"

        if not is_language_supported(self.target_language):
            return f"Unsupported target language: {self.target_language}"

        if self.output_format and self.output_format.lower().lstrip(".") not in OUTPUT_FORMATS:
            return f"Unsupported output format: {self.output_format}"

        return None


# Supported file extensions
SUPPORTED_EXTENSIONS = {".srt", ".vtt", ".ass", ".ssa"}

# Accepted --to values
OUTPUT_FORMATS = {f.value for f in SubtitleFormat} | {"ssa"}

# Maximum input file size
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
