"""Translation capability interface and the OpenAI-compatible backend adapter."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Protocol, runtime_checkable

from openai import AsyncOpenAI

from .config import LLMProvider, LLMSettings
from .languages import language_display_name
from .llm_client import call_llm_async, create_client
from .models import TranslationQuality, TranslationRequest, TranslationResponse
from .text_utils import clean_translated_text, estimate_confidence, validate_translation

logger = logging.getLogger(__name__)


@runtime_checkable
class TranslationCapability(Protocol):
    """What the orchestrator needs from a translation backend."""

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        ...

    def is_configured(self) -> bool:
        ...

    async def validate_config(self) -> bool:
        ...


SYSTEM_PROMPT = (
    "You are a professional subtitle translator. "
    "Translate the subtitle text accurately, keeping the tone and style of the original. "
    "Keep line breaks where they make sense and keep the translation concise enough to read on screen. "
    "Do not add explanations, notes or formatting."
)

QUALITY_TEMPERATURE: Dict[TranslationQuality, float] = {
    TranslationQuality.FAST: 0.1,
    TranslationQuality.STANDARD: 0.3,
    TranslationQuality.PRECISE: 0.2,
}

QUALITY_HINTS: Dict[TranslationQuality, str] = {
    TranslationQuality.FAST: "Translate quickly and keep it short.",
    TranslationQuality.STANDARD: "",
    TranslationQuality.PRECISE: (
        "Translate carefully, paying attention to context and details "
        "so the result is accurate and natural."
    ),
}

# OpenAI-style backends report no confidence; these are coarse defaults.
BASE_CONFIDENCE: Dict[LLMProvider, float] = {
    LLMProvider.OPENAI: 0.9,
    LLMProvider.CLAUDE: 0.9,
    LLMProvider.GEMINI: 0.9,
    LLMProvider.DEEPSEEK: 0.9,
    LLMProvider.CUSTOM_OPENAI: 0.85,
    LLMProvider.LOCAL: 0.8,
}

# Local servers ignore the key but the client requires one
_PLACEHOLDER_KEY = "not-needed"


def build_translation_messages(
    request: TranslationRequest,
    quality: TranslationQuality = TranslationQuality.STANDARD,
) -> List[Dict[str, str]]:
    """Build chat messages for translating one subtitle entry."""
    source = language_display_name(request.source_language)
    target = language_display_name(request.target_language)

    user_prompt = f"Translate the following {source} subtitle into {target}:\n\n{request.text}"

    if request.context:
        user_prompt += (
            f"\n\n## Context (neighbouring subtitles, do not translate):\n{request.context}"
        )

    hint = QUALITY_HINTS[quality]
    if hint:
        user_prompt += f"\n\n{hint}"

    user_prompt += "\n\nReturn only the translation."

    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


class OpenAICompatibleTranslator:
    """
    Translation capability backed by any OpenAI-format chat completion API
    (OpenAI, the OpenAI-compatible endpoints of Claude and Gemini, DeepSeek,
    self-hosted gateways, Ollama and similar local servers).
    """

    def __init__(self, settings: LLMSettings, client: Optional[AsyncOpenAI] = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = create_client(
                self.settings.api_key or _PLACEHOLDER_KEY,
                self.settings.base_url,
                self.settings.timeout,
            )
        return self._client

    @property
    def temperature(self) -> float:
        if self.settings.temperature is not None:
            return self.settings.temperature
        return QUALITY_TEMPERATURE[self.settings.quality]

    def is_configured(self) -> bool:
        if not self.settings.model:
            return False
        if self.settings.provider in (LLMProvider.CUSTOM_OPENAI, LLMProvider.LOCAL):
            if not self.settings.base_url:
                return False
        if self.settings.provider == LLMProvider.LOCAL:
            return True
        return bool(self.settings.api_key)

    async def validate_config(self) -> bool:
        """Check credentials and endpoint with a live model listing request."""
        if not self.is_configured():
            return False

        try:
            await self.client.models.list()
        except Exception as e:
            logger.warning(f"Backend validation failed ({self.settings.provider.value}): {e}")
            return False

        return True

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        if not self.is_configured():
            return TranslationResponse.failure(
                f"{self.settings.provider.value} backend is not configured"
            )

        messages = build_translation_messages(request, self.settings.quality)

        try:
            raw = await call_llm_async(
                self.client,
                self.settings.model,
                messages,
                temperature=self.temperature,
                max_retries=self.settings.max_retries,
                max_tokens=self.settings.max_tokens,
            )
        except Exception as e:
            return TranslationResponse.failure(str(e) or type(e).__name__)

        translated = clean_translated_text(raw)
        is_valid, error = validate_translation(request.text, translated)
        if not is_valid:
            return TranslationResponse.failure(error)

        return TranslationResponse(
            translated_text=translated,
            confidence=estimate_confidence(
                request.text, translated, BASE_CONFIDENCE[self.settings.provider]
            ),
        )


_ADAPTERS = {
    LLMProvider.OPENAI: OpenAICompatibleTranslator,
    LLMProvider.CLAUDE: OpenAICompatibleTranslator,
    LLMProvider.GEMINI: OpenAICompatibleTranslator,
    LLMProvider.DEEPSEEK: OpenAICompatibleTranslator,
    LLMProvider.CUSTOM_OPENAI: OpenAICompatibleTranslator,
    LLMProvider.LOCAL: OpenAICompatibleTranslator,
}


def create_translator(settings: LLMSettings, client: Optional[AsyncOpenAI] = None) -> TranslationCapability:
    """
    Return the capability for ``settings.provider``.

    Raises:
        ValueError: for an unknown provider tag
    """
    try:
        adapter = _ADAPTERS[LLMProvider(settings.provider)]
    except (KeyError, ValueError):
        raise ValueError(f"Unsupported LLM provider: {settings.provider}") from None
    return adapter(settings, client)
