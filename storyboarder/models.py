"""
Storyboard data models.

The completion service returns the storyboard with camelCase keys. Models
expose snake_case attributes and accept either form, and they keep unknown
keys so nothing the service adds is silently dropped.
"""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080

# Sentinel for "no background music"
NO_MUSIC = "none"


class StoryboardModel(BaseModel):
    """Base model using camelCase aliases on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class ElementKind(str, Enum):
    """Kind of on-screen element."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BULLET_LIST = "bulletList"
    IMAGE = "image"
    VIDEO_CLIP = "videoClip"
    CHART = "chart"
    CODE = "code"
    SHAPE = "shape"


class TransitionKind(str, Enum):
    """Transition between a slide and the next one."""

    CUT = "cut"
    CROSS_FADE = "cross-fade"
    PUSH_LEFT = "push-left"
    CUSTOM = "custom"


class Resolution(StoryboardModel):
    """Canonical frame size."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT


class StoryboardMeta(StoryboardModel):
    """Video-level attributes."""

    video_id: str = "generated-video"
    title: Optional[str] = None
    default_fps: Optional[float] = None
    default_resolution: Optional[Resolution] = None
    total_duration_sec: Optional[float] = None


class Element(StoryboardModel):
    """One on-screen item within a slide, timed relative to slide start."""

    kind: Union[ElementKind, str] = Field(union_mode="left_to_right")
    content: Any = None
    src: Optional[str] = None
    start_sec: float = 0.0
    end_sec: Optional[float] = None
    animation_in: Optional[str] = None
    animation_out: Optional[str] = None

    @property
    def is_known_kind(self) -> bool:
        return isinstance(self.kind, ElementKind)


class SfxCue(StoryboardModel):
    """A sound effect aligned to an offset within the slide."""

    src: str = ""
    at_sec: float = 0.0


class AudioTracks(StoryboardModel):
    """Background music and sound effect cues for a slide."""

    background_music: Optional[str] = NO_MUSIC
    sfx: list[SfxCue] = Field(default_factory=list)

    @property
    def has_background_music(self) -> bool:
        return bool(self.background_music) and self.background_music.lower() != NO_MUSIC


class Slide(StoryboardModel):
    """One timed segment of the video.

    Numeric ids are kept as strings. Null ``elements`` or ``audioTracks``
    read as empty, and a null ``transitionToNext`` reads as a cut.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    title: Optional[str] = ""
    duration_sec: float = 0.0
    elements: list[Element] = Field(default_factory=list)
    narration: Optional[str] = ""
    subtitles: Optional[str] = ""
    audio_tracks: AudioTracks = Field(default_factory=AudioTracks)
    transition_to_next: Union[TransitionKind, str] = Field(
        default=TransitionKind.CUT, union_mode="left_to_right"
    )
    director_notes: Optional[str] = None

    @field_validator("elements", mode="before")
    @classmethod
    def _null_elements(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("audio_tracks", mode="before")
    @classmethod
    def _null_audio_tracks(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("transition_to_next", mode="before")
    @classmethod
    def _null_transition(cls, value: Any) -> Any:
        return TransitionKind.CUT if value is None else value


class Storyboard(StoryboardModel):
    """Full structured description of a generated video."""

    meta: Optional[StoryboardMeta] = None
    slides: list[Slide] = Field(default_factory=list)

    @property
    def slide_duration_sum(self) -> float:
        return sum(slide.duration_sec for slide in self.slides)

    @property
    def total_duration_sec(self) -> float:
        """Declared total duration, falling back to the slide sum."""
        if self.meta and self.meta.total_duration_sec is not None:
            return self.meta.total_duration_sec
        return self.slide_duration_sum
