"""Error types raised by the storyboard pipeline."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .extraction.validator import Finding


class StoryboarderError(Exception):
    """Base class for all pipeline errors."""

    pass


class ConfigurationError(StoryboarderError):
    """Missing credential, missing CLI argument or unusable configuration."""

    pass


class ServiceError(StoryboarderError):
    """The completion service did not return a usable reply."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ExtractionError(StoryboarderError):
    """An expected fenced block is absent from the reply."""

    pass


class ParseError(StoryboarderError):
    """The machine-readable storyboard is not valid structured data."""

    pass


class DuplicateSlideIdError(ParseError):
    """Two slides share the same id."""

    def __init__(self, slide_id: str):
        super().__init__(f"Duplicate slide id: {slide_id!r}")
        self.slide_id = slide_id


class FindingsError(StoryboarderError):
    """Validation findings were escalated to a failure by the caller."""

    def __init__(self, findings: list["Finding"]):
        summary = "; ".join(f.message for f in findings)
        super().__init__(f"{len(findings)} validation finding(s): {summary}")
        self.findings = findings
