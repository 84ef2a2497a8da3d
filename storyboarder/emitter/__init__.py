"""Artifact emission - writes storyboard files, Video.tsx and voiceover placeholders."""

from dataclasses import dataclass, field
from pathlib import Path

from ..config import VideoConfig
from ..extraction.extractor import ExtractedBlocks
from ..extraction.validator import ValidationResult
from .composition import render_composition, sanitize_identifier, write_composition
from .writer import write_serializations, write_summary, write_voiceover_placeholders


@dataclass
class EmitResult:
    """Paths of everything written for one storyboard."""

    yaml_path: Path
    json_path: Path
    composition_path: Path | None = None
    voiceover_paths: list[Path] = field(default_factory=list)
    summary_path: Path | None = None


def emit_artifacts(
    blocks: ExtractedBlocks,
    result: ValidationResult,
    output_dir: Path | str,
    video: VideoConfig | None = None,
) -> EmitResult:
    """Write all artifacts for a validated storyboard.

    Creates the output directory if needed. Running this twice with the same
    inputs produces identical files.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    yaml_path, json_path = write_serializations(blocks, output_dir)
    return EmitResult(
        yaml_path=yaml_path,
        json_path=json_path,
        composition_path=write_composition(result.storyboard, output_dir, video),
        voiceover_paths=write_voiceover_placeholders(result.storyboard, output_dir),
        summary_path=write_summary(result.summary, output_dir),
    )


__all__ = [
    "EmitResult",
    "emit_artifacts",
    "render_composition",
    "sanitize_identifier",
    "write_composition",
    "write_serializations",
    "write_summary",
    "write_voiceover_placeholders",
]
