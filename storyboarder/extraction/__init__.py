"""Reply extraction and validation."""

from .extractor import ExtractedBlocks, extract_blocks
from .validator import (
    Finding,
    StoryboardValidator,
    ValidationMode,
    ValidationResult,
)

__all__ = [
    "ExtractedBlocks",
    "extract_blocks",
    "Finding",
    "StoryboardValidator",
    "ValidationMode",
    "ValidationResult",
]
