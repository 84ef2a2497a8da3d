"""File writers for storyboard artifacts."""

from pathlib import Path

from ..extraction.extractor import ExtractedBlocks
from ..models import Storyboard

YAML_FILENAME = "storyboard.yaml"
JSON_FILENAME = "storyboard.json"
SUMMARY_FILENAME = "EXEC_SUMMARY.txt"

# Remotion serves audio from public/ relative to the project root
VOICEOVER_DIR = Path("public") / "voiceovers"


def write_serializations(blocks: ExtractedBlocks, output_dir: Path) -> tuple[Path, Path]:
    """Write the YAML and JSON blocks exactly as the service returned them.

    Returns:
        Tuple of (yaml_path, json_path)
    """
    output_dir = Path(output_dir)
    yaml_path = output_dir / YAML_FILENAME
    json_path = output_dir / JSON_FILENAME
    yaml_path.write_text(blocks.yaml_text, encoding="utf-8")
    json_path.write_text(blocks.json_text, encoding="utf-8")
    return yaml_path, json_path


def write_voiceover_placeholders(storyboard: Storyboard, output_dir: Path) -> list[Path]:
    """Create an empty ``<slide.id>.mp3`` per slide.

    The files mark which voiceovers still need recording or synthesis.
    """
    voice_dir = Path(output_dir) / VOICEOVER_DIR
    voice_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for slide in storyboard.slides:
        path = voice_dir / f"{slide.id}.mp3"
        path.write_bytes(b"")
        paths.append(path)
    return paths


def write_summary(summary: str, output_dir: Path) -> Path | None:
    """Write the trailing summary text, if there is any."""
    summary = summary.strip()
    if not summary:
        return None

    path = Path(output_dir) / SUMMARY_FILENAME
    path.write_text(summary, encoding="utf-8")
    return path
