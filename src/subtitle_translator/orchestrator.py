"""Translation orchestrator: drives subtitle entries through a translation capability."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from .capability import TranslationCapability
from .errors import ConfigurationError, TranslationCancelled
from .models import (
    ConcurrencySettings,
    SubtitleEntry,
    SubtitleFile,
    TranslationRequest,
    TranslationStatus,
)
from .progress import ProgressReporter, TranslationProgress
from .text_utils import truncate_text

logger = logging.getLogger(__name__)


def build_context(entries: List[SubtitleEntry], index: int) -> str:
    """Neighbouring entries' original text, passed to the backend as context only."""
    parts: List[str] = []
    if index > 0:
        parts.append(f'Previous: "{entries[index - 1].original_text}"')
    if index < len(entries) - 1:
        parts.append(f'Next: "{entries[index + 1].original_text}"')
    return "\n".join(parts)


class TranslationOrchestrator:
    """
    Translate the entries of a SubtitleFile with bounded concurrency.

    A single entry failing never aborts the run: the error is recorded in
    the progress and the entry keeps its source text as translation.
    ``pause()``, ``resume()`` and ``cancel()`` take effect at the next
    boundary (before an entry in sequential mode, before a batch otherwise);
    requests already in flight are allowed to finish.

    One run at a time per instance. Control methods must be called from
    the event loop running the translation.
    """

    def __init__(
        self,
        capability: TranslationCapability,
        settings: Optional[ConcurrencySettings] = None,
        reporter: Optional[ProgressReporter] = None,
    ):
        self.capability = capability
        self.settings = settings or ConcurrencySettings()
        self.reporter = reporter or ProgressReporter()

        self._status = TranslationStatus.IDLE
        self._cancelled = False
        # set while running, cleared while paused
        self._resume_event = asyncio.Event()
        self._resume_event.set()
        self._active = False

    @property
    def status(self) -> TranslationStatus:
        return self._status

    @property
    def is_paused(self) -> bool:
        return not self._resume_event.is_set()

    def _set_status(self, status: TranslationStatus) -> None:
        self._status = status
        self.reporter.emit_status(status)

    # ------------------------------------------------------------------
    # control
    # ------------------------------------------------------------------

    def pause(self) -> None:
        if not self._active or self._cancelled or self.is_paused:
            logger.debug("Pause ignored: no running translation")
            return
        self._resume_event.clear()
        if self._status == TranslationStatus.RUNNING:
            logger.info("Pausing translation")
            self._set_status(TranslationStatus.PAUSED)
        else:
            # still checking the backend; takes effect once the run starts
            logger.info("Pause requested, translation will start paused")

    def resume(self) -> None:
        if not self._active or not self.is_paused:
            logger.debug("Resume ignored: translation is not paused")
            return
        logger.info("Resuming translation")
        self._resume_event.set()
        if self._status == TranslationStatus.PAUSED:
            self._set_status(TranslationStatus.RUNNING)

    def cancel(self) -> None:
        if not self._active:
            return
        logger.info("Cancelling translation")
        self._cancelled = True
        # wake a paused run so it can notice the cancellation
        self._resume_event.set()

    async def _checkpoint(self) -> None:
        await self._resume_event.wait()
        if self._cancelled:
            raise TranslationCancelled("Translation cancelled")

    # ------------------------------------------------------------------
    # run
    # ------------------------------------------------------------------

    async def _check_capability(self, validate_config: bool) -> None:
        if not self.capability.is_configured():
            raise ConfigurationError("Translation backend is not configured")

        if validate_config and not await self.capability.validate_config():
            raise ConfigurationError(
                "Translation backend validation failed, check API key, endpoint and model"
            )

    async def translate_file(
        self,
        subtitle: SubtitleFile,
        source_language: str,
        target_language: str,
        validate_config: bool = False,
    ) -> SubtitleFile:
        """
        Translate every entry of ``subtitle``.

        Args:
            subtitle: File whose entries receive ``translated_text``
            source_language: Source language code
            target_language: Target language code
            validate_config: Run the backend's live connectivity probe first

        Returns:
            The same SubtitleFile with translations filled in

        Raises:
            ConfigurationError: the backend is not configured or failed validation
            TranslationCancelled: ``cancel()`` was called during the run
        """
        if self._active:
            raise RuntimeError("A translation run is already active on this orchestrator")

        self._active = True
        self._cancelled = False
        # fresh event so it binds to the loop running this call
        self._resume_event = asyncio.Event()
        self._resume_event.set()

        try:
            await self._check_capability(validate_config)
        except Exception:
            self._active = False
            raise

        if self._cancelled:
            self._active = False
            logger.info("Translation cancelled before the first entry")
            self._set_status(TranslationStatus.CANCELLED)
            raise TranslationCancelled("Translation cancelled")

        progress = TranslationProgress(total=len(subtitle.entries))
        self._set_status(TranslationStatus.RUNNING)
        if self.is_paused:
            self._set_status(TranslationStatus.PAUSED)
        logger.info(
            f"Translating {progress.total} entries of '{subtitle.name}' "
            f"({source_language} -> {target_language}, "
            f"max_concurrent={self.settings.max_concurrent}, batch_size={self.settings.batch_size})"
        )

        try:
            if self.settings.is_sequential:
                await self._translate_sequentially(subtitle, source_language, target_language, progress)
            else:
                await self._translate_concurrently(subtitle, source_language, target_language, progress)
        except TranslationCancelled:
            logger.info(f"Translation cancelled after {progress.completed}/{progress.total} entries")
            self._set_status(TranslationStatus.CANCELLED)
            raise
        except Exception:
            self._set_status(TranslationStatus.FAILED)
            raise
        finally:
            self._active = False
            self._resume_event.set()

        if progress.total == 0:
            self.reporter.emit_progress(progress)
        self._set_status(TranslationStatus.COMPLETED)
        logger.info(
            f"Translation finished: {progress.total - len(progress.errors)}/{progress.total} "
            f"translated, {len(progress.errors)} error(s)"
        )
        return subtitle

    async def _translate_entry(
        self,
        entries: List[SubtitleEntry],
        index: int,
        source_language: str,
        target_language: str,
        progress: TranslationProgress,
    ) -> SubtitleEntry:
        """Translate one entry; failures fall back to the source text."""
        entry = entries[index]
        request = TranslationRequest(
            text=entry.text,
            source_language=source_language,
            target_language=target_language,
            context=build_context(entries, index) or None,
        )

        try:
            response = await self.capability.translate(request)
            reason = response.error
            if not reason and not response.translated_text:
                reason = "Empty translation"
        except Exception as e:
            reason = str(e) or type(e).__name__

        if reason:
            logger.warning(f"Translation failed for entry {entry.id}: {reason}")
            progress.errors.append(f"entry {entry.id}: {reason}")
            return entry.copy(translated_text=entry.text)

        return entry.copy(translated_text=response.translated_text)

    async def _delay(self) -> None:
        if self.settings.delay_between_requests > 0:
            await asyncio.sleep(self.settings.delay_between_requests / 1000)

    async def _translate_sequentially(
        self,
        subtitle: SubtitleFile,
        source_language: str,
        target_language: str,
        progress: TranslationProgress,
    ) -> None:
        entries = subtitle.entries

        for i, entry in enumerate(entries):
            await self._checkpoint()

            progress.current = truncate_text(entry.text)
            self.reporter.emit_progress(progress)

            result = await self._translate_entry(entries, i, source_language, target_language, progress)
            entry.translated_text = result.translated_text

            progress.advance_to(i + 1)
            self.reporter.emit_progress(progress)

            if i < len(entries) - 1:
                await self._delay()

    async def _translate_concurrently(
        self,
        subtitle: SubtitleFile,
        source_language: str,
        target_language: str,
        progress: TranslationProgress,
    ) -> None:
        entries = subtitle.entries
        total = len(entries)
        results: List[Optional[SubtitleEntry]] = [None] * total
        batch_size = self.settings.batch_size
        sem = asyncio.Semaphore(self.settings.max_concurrent)

        async def run_one(index: int) -> None:
            async with sem:
                results[index] = await self._translate_entry(
                    entries, index, source_language, target_language, progress
                )

        for batch_start in range(0, total, batch_size):
            await self._checkpoint()

            batch_end = min(batch_start + batch_size, total)
            logger.debug(f"Dispatching batch {batch_start + 1}-{batch_end} of {total}")

            await asyncio.gather(*(run_one(i) for i in range(batch_start, batch_end)))

            progress.advance_to(batch_end)
            progress.current = truncate_text(entries[batch_end - 1].text)
            self.reporter.emit_progress(progress)

            if batch_end < total:
                await self._delay()

        subtitle.entries = [r for r in results if r is not None]
