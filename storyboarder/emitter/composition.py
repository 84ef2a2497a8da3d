"""Remotion composition stub generation."""

import json
import re
from pathlib import Path

from rich.console import Console

from ..config import VideoConfig
from ..models import Storyboard, StoryboardMeta

console = Console()

COMPOSITION_FILENAME = "Video.tsx"

# Prefix for identifiers that would otherwise be empty or start with a digit
IDENTIFIER_PREFIX = "Video"


VIDEO_TEMPLATE = """import React from 'react';
import {{ Composition, Sequence, AbsoluteFill }} from 'remotion';
import storyboard from './storyboard.json';

// Auto-generated by storyboarder from storyboard.json.
// Each slide becomes a Sequence; element rendering is left to the project.

const FPS = {fps};

const Slide: React.FC<{{ slide: any }}> = ({{ slide }}) => {{
  // Map slide.elements to your own components, animate them with
  // startSec/endSec and add Audio for narration, backgroundMusic and sfx.
  return (
    <AbsoluteFill style={{{{ backgroundColor: 'white', color: 'black', justifyContent: 'center', alignItems: 'center' }}}}>
      <h1>{{slide.title}}</h1>
    </AbsoluteFill>
  );
}};

const MainVideo: React.FC = () => {{
  let currentFrame = 0;
  const sequences = storyboard.slides.map((slide: any) => {{
    const durationFrames = Math.round(slide.durationSec * FPS);
    const from = currentFrame;
    currentFrame += durationFrames;
    return (
      <Sequence key={{slide.id}} from={{from}} durationInFrames={{durationFrames}}>
        <Slide slide={{slide}} />
      </Sequence>
    );
  }});
  return <>{{sequences}}</>;
}};

export const {component_name}: React.FC = () => {{
  return (
    <Composition
      id={composition_id}
      component={{MainVideo}}
      durationInFrames={{{total_frames}}}
      fps={{FPS}}
      width={{{width}}}
      height={{{height}}}
    />
  );
}};

export default {component_name};
"""


def sanitize_identifier(value: str) -> str:
    """Convert a slug such as a videoId into a valid PascalCase identifier.

    Every run of non-alphanumeric characters is a token boundary. The result
    is prefixed with ``Video`` when it would be empty or start with a digit.

    Args:
        value: Raw identifier (e.g., "3-ways-ai-helps")

    Returns:
        Identifier (e.g., "Video3WaysAiHelps")
    """
    words = re.split(r"[^a-zA-Z0-9]+", value)
    name = "".join(word[0].upper() + word[1:] for word in words if word)
    if not name or name[0].isdigit():
        name = IDENTIFIER_PREFIX + name
    return name


def composition_id(value: str) -> str:
    """Remotion composition ids allow only letters, digits and hyphens."""
    slug = re.sub(r"[^a-zA-Z0-9-]+", "-", value).strip("-")
    return slug or "generated-video"


def seconds_to_frames(seconds: float, fps: float = 30) -> int:
    """Convert seconds to a whole number of frames, rounding to nearest."""
    return int(round(seconds * fps))


def format_fps(fps: float) -> str:
    """Render a frame rate as a TS number literal (30, not 30.0; 29.97 kept)."""
    if float(fps).is_integer():
        return str(int(fps))
    return str(float(fps))


def render_composition(
    meta: StoryboardMeta,
    total_duration_sec: float,
    video: VideoConfig | None = None,
) -> str:
    """Render Video.tsx source for the given meta.

    Args:
        meta: Storyboard meta
        total_duration_sec: Duration used for ``durationInFrames``
        video: Fallback fps and resolution (30 fps, 1920x1080 by default)

    Returns:
        TSX source code
    """
    video = video or VideoConfig()
    fps = meta.default_fps or video.fps
    resolution = meta.default_resolution
    width = resolution.width if resolution and resolution.width else video.width
    height = resolution.height if resolution and resolution.height else video.height
    return VIDEO_TEMPLATE.format(
        fps=format_fps(fps),
        component_name=sanitize_identifier(meta.video_id),
        composition_id=json.dumps(composition_id(meta.video_id)),
        total_frames=seconds_to_frames(total_duration_sec, fps),
        width=width,
        height=height,
    )


def write_composition(
    storyboard: Storyboard,
    output_dir: Path,
    video: VideoConfig | None = None,
) -> Path | None:
    """Write Video.tsx into the output directory.

    Returns:
        Path of the written file, or None when the storyboard has no meta
    """
    if storyboard.meta is None:
        console.print("[yellow]Warning:[/yellow] No meta field in storyboard; cannot generate Video.tsx")
        return None

    source = render_composition(storyboard.meta, storyboard.total_duration_sec, video)
    path = Path(output_dir) / COMPOSITION_FILENAME
    path.write_text(source, encoding="utf-8")
    return path
