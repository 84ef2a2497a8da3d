"""Configuration loading and management."""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError


class LLMConfig(BaseModel):
    """Completion service configuration."""

    provider: str = "openai"
    model: str = "gpt-4o"
    temperature: float = 0.3
    base_url: str = "https://api.openai.com/v1"
    api_key_env: str = "OPENAI_API_KEY"
    timeout_seconds: float = 120.0
    max_retries: int = Field(default=2, ge=0)
    backoff_seconds: float = 2.0


class PromptConfig(BaseModel):
    """Prompt template configuration."""

    template_path: str | None = None


class ValidationConfig(BaseModel):
    """Reply validation configuration."""

    mode: Literal["strict", "lenient"] = "lenient"
    duration_tolerance_sec: float = 0.01
    fail_on_findings: bool = False


class VideoConfig(BaseModel):
    """Fallback video settings used when the storyboard omits them."""

    width: int = 1920
    height: int = 1080
    fps: float = 30


class Config(BaseModel):
    """Main application configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    prompt: PromptConfig = Field(default_factory=PromptConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    video: VideoConfig = Field(default_factory=VideoConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "Config":
        """Load configuration from a YAML file.

        Raises:
            ConfigurationError: If the file is not valid YAML or does not
                describe a configuration
        """
        path = Path(path)
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file {path}: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")

        # Flatten nested resolution config
        video = data.get("video")
        if isinstance(video, dict) and isinstance(video.get("resolution"), dict):
            res = video.pop("resolution")
            video["width"] = res.get("width", 1920)
            video["height"] = res.get("height", 1080)

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid config file {path}: {e}") from e


def load_config(config_path: Path | str | None = None) -> Config:
    """Load configuration from file or use defaults."""
    if config_path is None:
        # Look for config.yaml in current directory or project root
        candidates = [Path("config.yaml"), Path(__file__).parent.parent / "config.yaml"]
        for candidate in candidates:
            if candidate.exists():
                config_path = candidate
                break

    if config_path is not None:
        return Config.from_yaml(config_path)

    return Config()
