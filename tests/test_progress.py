"""Tests for progress tracking and observers."""

import io

import pytest

from subtitle_translator.models import TranslationStatus
from subtitle_translator.progress import (
    ProgressReporter,
    TqdmProgressObserver,
    TranslationObserver,
    TranslationProgress,
)


class Recorder(TranslationObserver):

    def __init__(self):
        self.progress = []
        self.statuses = []

    def on_progress(self, progress):
        self.progress.append(progress)

    def on_status(self, status):
        self.statuses.append(status)


class TestTranslationProgress:

    def test_completion_rate(self):
        progress = TranslationProgress(total=4, completed=1)
        assert progress.completion_rate == 0.25
        assert not progress.is_complete

    def test_empty_is_complete(self):
        progress = TranslationProgress(total=0)
        assert progress.is_complete
        assert progress.completion_rate == 1.0

    def test_advance_is_monotonic_and_clamped(self):
        progress = TranslationProgress(total=5)
        progress.advance_to(3)
        progress.advance_to(2)
        assert progress.completed == 3
        progress.advance_to(9)
        assert progress.completed == 5

    def test_snapshot_is_independent(self):
        progress = TranslationProgress(total=2, errors=["entry 1: x"])
        snapshot = progress.snapshot()
        progress.errors.append("entry 2: y")
        progress.completed = 2
        assert snapshot.errors == ["entry 1: x"]
        assert snapshot.completed == 0


class TestProgressReporter:

    def test_subscribe_and_emit(self):
        reporter = ProgressReporter()
        recorder = Recorder()
        reporter.subscribe(recorder)

        reporter.emit_progress(TranslationProgress(total=3, completed=1))
        reporter.emit_status(TranslationStatus.RUNNING)

        assert recorder.progress[0].completed == 1
        assert recorder.statuses == [TranslationStatus.RUNNING]

    def test_subscribe_twice_registers_once(self):
        reporter = ProgressReporter()
        recorder = Recorder()
        reporter.subscribe(recorder)
        reporter.subscribe(recorder)
        assert len(reporter) == 1

    def test_unsubscribe_handle(self):
        reporter = ProgressReporter()
        recorder = Recorder()
        unsubscribe = reporter.subscribe(recorder)

        unsubscribe()
        unsubscribe()
        reporter.emit_status(TranslationStatus.RUNNING)

        assert recorder.statuses == []
        assert len(reporter) == 0

    def test_close(self):
        reporter = ProgressReporter()
        reporter.subscribe(Recorder())
        reporter.subscribe(Recorder())
        reporter.close()
        assert len(reporter) == 0

    def test_failing_observer_is_isolated(self, caplog):
        class Broken(TranslationObserver):
            def on_status(self, status):
                raise RuntimeError("boom")

        reporter = ProgressReporter()
        recorder = Recorder()
        reporter.subscribe(Broken())
        reporter.subscribe(recorder)

        reporter.emit_status(TranslationStatus.COMPLETED)

        assert recorder.statuses == [TranslationStatus.COMPLETED]
        assert "failed" in caplog.text

    def test_observers_get_copies(self):
        class Mutator(TranslationObserver):
            def on_progress(self, progress):
                progress.errors.append("tampered")

        reporter = ProgressReporter()
        reporter.subscribe(Mutator())
        progress = TranslationProgress(total=1)
        reporter.emit_progress(progress)
        assert progress.errors == []


class TestTqdmProgressObserver:

    def test_bar_follows_progress(self):
        observer = TqdmProgressObserver(file=io.StringIO())
        observer.on_progress(TranslationProgress(total=4, completed=1))
        observer.on_progress(TranslationProgress(total=4, completed=3, errors=["entry 2: x"]))
        assert observer._bar.n == 3

        observer.on_status(TranslationStatus.COMPLETED)
        assert observer._bar is None

    def test_status_before_progress(self):
        observer = TqdmProgressObserver(file=io.StringIO())
        observer.on_status(TranslationStatus.PAUSED)
        observer.on_status(TranslationStatus.CANCELLED)
        assert observer._bar is None
