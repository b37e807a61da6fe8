"""Exception types raised by the subtitle translator."""


class SubtitleTranslatorError(Exception):
    """Base class for all errors raised by this package."""


class SubtitleFormatError(SubtitleTranslatorError):
    """Input content does not match the expected subtitle format."""


class UnsupportedFormatError(SubtitleFormatError):
    """Subtitle format could not be recognized from the file name or content."""

    def __init__(self, filename: str = ""):
        target = f" for '{filename}'" if filename else ""
        super().__init__(
            f"Subtitle format not recognized{target}. Supported formats: SRT, VTT, ASS"
        )
        self.filename = filename


class ConfigurationError(SubtitleTranslatorError):
    """The translation backend is missing credentials or cannot be reached."""


class TranslationCancelled(SubtitleTranslatorError):
    """A translation run was cancelled before it completed."""
