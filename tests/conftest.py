"""Shared test fixtures."""

import json
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from storyboarder.config import Config


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-llm-tests",
        action="store_true",
        default=False,
        help="Run completion service integration tests (expensive, makes real API calls)",
    )


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "llm_integration: mark test as requiring real completion calls"
    )


def pytest_collection_modifyitems(config, items):
    """Skip LLM tests unless --run-llm-tests is provided."""
    if not config.getoption("--run-llm-tests", default=False):
        skip_llm = pytest.mark.skip(
            reason="LLM integration tests skipped. Use --run-llm-tests to run."
        )
        for item in items:
            if "llm_integration" in item.keywords:
                item.add_marker(skip_llm)


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration."""
    return Config()


@pytest.fixture
def mock_config() -> Config:
    """Provide a test configuration with the mock completion provider."""
    config = Config()
    config.llm.provider = "mock"
    return config


@pytest.fixture
def storyboard_data() -> dict[str, Any]:
    """Provide a well-formed storyboard with three slides totalling 60 seconds."""
    return {
        "meta": {
            "videoId": "3-ways-ai-helps",
            "title": "3 Ways AI Helps",
            "defaultFps": 30,
            "defaultResolution": {"width": 1920, "height": 1080},
            "totalDurationSec": 60,
        },
        "slides": [
            {
                "id": "intro",
                "title": "Introduction",
                "durationSec": 20,
                "elements": [
                    {
                        "kind": "heading",
                        "content": "3 Ways AI Helps",
                        "animationIn": "fade",
                        "animationOut": "fade",
                        "startSec": 0,
                        "endSec": 20,
                    }
                ],
                "narration": "Let's see how AI helps us every day.",
                "subtitles": "How AI helps every day.",
                "audioTracks": {"backgroundMusic": "calm.mp3", "sfx": []},
                "transitionToNext": "cross-fade",
                "directorNotes": "Linger on the title.",
            },
            {
                "id": "examples",
                "title": "Examples",
                "durationSec": 25,
                "elements": [
                    {
                        "kind": "bulletList",
                        "content": ["Search", "Translation", "Coding"],
                        "animationIn": "spring-fly-in",
                        "startSec": 2,
                    },
                    {"kind": "image", "src": "chart.png", "startSec": 10, "endSec": 24},
                ],
                "narration": "We use it for search, translation and coding.",
                "subtitles": "Search, translation, coding.",
                "audioTracks": {
                    "backgroundMusic": "none",
                    "sfx": [{"src": "pop.mp3", "atSec": 2}],
                },
                "transitionToNext": "push-left",
            },
            {
                "id": "outro",
                "title": "Wrap Up",
                "durationSec": 15,
                "elements": [{"kind": "paragraph", "content": "Thanks for watching."}],
                "narration": "Thanks for watching with us.",
                "subtitles": "Thanks for watching.",
                "audioTracks": {"backgroundMusic": "none", "sfx": []},
                "transitionToNext": "cut",
            },
        ],
    }


@pytest.fixture
def make_reply() -> Callable[..., str]:
    """Build a completion reply with YAML and JSON fences around storyboard data."""

    def _make_reply(
        data: dict[str, Any],
        yaml_data: Any = None,
        summary: str = "| id | title | durationSec |\n|----|-------|-------------|",
    ) -> str:
        yaml_text = yaml.safe_dump(data if yaml_data is None else yaml_data, sort_keys=False)
        json_text = json.dumps(data, indent=2)
        return (
            "Here is your storyboard.\n\n"
            f"```yaml\n{yaml_text}```\n\n"
            f"```json\n{json_text}\n```\n\n"
            f"{summary}\n"
        )

    return _make_reply


@pytest.fixture
def research_file(tmp_path: Path) -> Path:
    """Provide a research text file."""
    path = tmp_path / "research.md"
    path.write_text(
        "# AI in Daily Life\n\nAI helps with search, translation and coding.\n",
        encoding="utf-8",
    )
    return path
