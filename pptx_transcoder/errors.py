from typing import Dict, Optional


class TranscoderError(Exception):
    """Base class for failures surfaced to the caller of a translation run."""


class PackageLoadError(TranscoderError):
    pass


class ExtractionError(TranscoderError):
    def __init__(self, slide_id: str, message: str):
        super().__init__(f"{slide_id}: {message}")
        self.slide_id = slide_id


class GenerationError(TranscoderError):
    def __init__(self, language: Optional[str], message: str):
        prefix = f"[{language}] " if language else ""
        super().__init__(prefix + message)
        self.language = language


class TranscodeJobError(TranscoderError):
    """Raised only when every target language of a job failed."""

    def __init__(self, errors: Dict[str, TranscoderError]):
        lines = [f"{lang.upper()}: {err}" for lang, err in errors.items()]
        super().__init__(
            "Translation failed for all languages:\n" + "\n".join(lines)
            if lines
            else "No target languages were processed"
        )
        self.errors = errors


class UnresolvedSubstitution(UserWarning):
    """A translation existed for an element but no safe place to write it was found.

    Instances are recorded on the slide, never raised.
    """

    def __init__(self, element_id: str, original_text: str, reason: str):
        super().__init__(f"{element_id}: {reason} ({original_text!r})")
        self.element_id = element_id
        self.original_text = original_text
        self.reason = reason
