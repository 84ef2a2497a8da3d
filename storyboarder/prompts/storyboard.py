"""Master prompt for storyboard generation."""

from pathlib import Path

from ..errors import ConfigurationError

RESEARCH_PLACEHOLDER = "<<PASTE FULL RESEARCH TEXT HERE>>"


STORYBOARD_PROMPT_TEMPLATE = """You are "Storyboard-AI", a film director who outputs YAML-based storyboards for Remotion.
Input research (verbatim, multi-thousand words) is delimited by <<<RESEARCH>>> ... <<<END>>>.
Tasks:

1. **Narrative arc** - Decide Act I (hook / problem), Act II (analysis / tension), Act III (resolution / call-to-action).
2. **Slide breakdown** - Partition the story into numbered scenes (~15-45 sec each).
3. **For every slide**, output:
   - 'id' (kebab-case, unique), 'title', 'durationSec'.
   - 'elements[]' ordered by on-screen appearance. Each element:
     - 'kind' (heading | paragraph | bulletList | image | videoClip | chart | code | shape)
     - 'content' or 'src'
     - 'animationIn' / 'animationOut' (fade, wipe-right, scale-up, spring-fly-in, etc.)
     - 'startSec', optional 'endSec' (seconds relative to the slide start).
   - 'narration' - conversational, 1st-person plural, <= 80 words.
   - 'subtitles' - identical to narration or condensed captions.
   - 'audioTracks': backgroundMusic (file name or "none"); sfx[] of {src, atSec}.
   - 'transitionToNext' - cut | cross-fade | push-left | custom.
   - 'directorNotes' - free text with pacing hints, visual mood, colour cues, relationship to previous/next slide, which element deserves emphasis, suggested FPS if divergent from default, volume ducking hints, mention "linger" or "skip quickly" as needed.

4. Start with a 'meta' object: 'videoId' (kebab-case), 'title', 'defaultFps', 'defaultResolution' {width, height} and 'totalDurationSec' (must equal the sum of all slide durations).

5. Emit two artifacts with *identical* data, each in its own fenced block:
   a) a ```yaml block - storyboard.yaml, easy for humans;
   b) a ```json block - storyboard.json, camelCase keys for machines.

6. After the YAML & JSON blocks, output an **exec summary table** listing slide id, title and durationSec to help editors spot timing at a glance.

Remember: No Remotion code - just the data.

<<<RESEARCH>>>
<<PASTE FULL RESEARCH TEXT HERE>>
<<<END>>>"""


def compose_prompt(research_text: str, template: str = STORYBOARD_PROMPT_TEMPLATE) -> str:
    """Insert research text into a prompt template.

    The text is inserted verbatim: no escaping, truncation or length limit.

    Args:
        research_text: The raw research text.
        template: Template containing the placeholder exactly once.

    Returns:
        The composed prompt.

    Raises:
        ConfigurationError: If the template does not contain exactly one placeholder.
    """
    count = template.count(RESEARCH_PLACEHOLDER)
    if count != 1:
        raise ConfigurationError(
            f"Prompt template must contain {RESEARCH_PLACEHOLDER} exactly once (found {count})"
        )
    return template.replace(RESEARCH_PLACEHOLDER, research_text, 1)


def load_prompt_template(path: Path | str | None = None) -> str:
    """Load a prompt template from disk, or return the built-in one."""
    if path is None:
        return STORYBOARD_PROMPT_TEMPLATE

    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Prompt template not found: {path}")

    return path.read_text(encoding="utf-8")
