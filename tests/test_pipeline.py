"""Tests for the storyboard pipeline orchestrator."""

import copy
import json

import httpx
import pytest

from storyboarder.completion import MockCompletionProvider, OpenAICompletionProvider
from storyboarder.config import Config
from storyboarder.errors import (
    ConfigurationError,
    ExtractionError,
    FindingsError,
    ParseError,
    ServiceError,
)
from storyboarder.pipeline import StoryboardPipeline
from storyboarder.prompts import RESEARCH_PLACEHOLDER


def make_pipeline(config: Config, reply: str) -> StoryboardPipeline:
    return StoryboardPipeline(config, provider=MockCompletionProvider(config.llm, reply=reply))


class TestStoryboardPipeline:
    """End-to-end runs with a mock completion provider."""

    def test_full_run_writes_all_artifacts(
        self, mock_config, research_file, tmp_path, storyboard_data, make_reply
    ):
        """A well-formed reply produces every artifact."""
        output_dir = tmp_path / "out"
        pipeline = make_pipeline(mock_config, make_reply(storyboard_data))

        result = pipeline.run(research_file, output_dir)

        assert (output_dir / "storyboard.yaml").exists()
        assert json.loads((output_dir / "storyboard.json").read_text()) == storyboard_data
        assert (output_dir / "Video.tsx").exists()
        assert (output_dir / "EXEC_SUMMARY.txt").exists()
        voice_dir = output_dir / "public" / "voiceovers"
        assert sorted(p.name for p in voice_dir.iterdir()) == [
            "examples.mp3",
            "intro.mp3",
            "outro.mp3",
        ]
        assert result.findings == []
        assert result.stages_completed == [
            "read",
            "prompt",
            "completion",
            "extraction",
            "validation",
            "emit",
        ]

    def test_prompt_contains_research(self, mock_config, research_file, tmp_path, storyboard_data, make_reply):
        """The provider receives the research text inside the prompt."""
        provider = MockCompletionProvider(mock_config.llm, reply=make_reply(storyboard_data))
        pipeline = StoryboardPipeline(mock_config, provider=provider)

        pipeline.run(research_file, tmp_path / "out")

        assert len(provider.prompts) == 1
        assert research_file.read_text(encoding="utf-8") in provider.prompts[0]
        assert RESEARCH_PLACEHOLDER not in provider.prompts[0]

    def test_default_mock_reply(self, mock_config, research_file, tmp_path):
        """The built-in mock reply runs cleanly through the pipeline."""
        result = StoryboardPipeline(mock_config).run(research_file, tmp_path / "out")

        assert result.findings == []
        assert [s.id for s in result.storyboard.slides] == ["hook", "analysis", "wrap-up"]
        assert "export const MockExplainer" in (tmp_path / "out" / "Video.tsx").read_text()

    def test_custom_prompt_template(self, mock_config, research_file, tmp_path, storyboard_data, make_reply):
        """A configured template file replaces the built-in prompt."""
        template = tmp_path / "template.txt"
        template.write_text(f"CUSTOM\n{RESEARCH_PLACEHOLDER}", encoding="utf-8")
        mock_config.prompt.template_path = str(template)
        provider = MockCompletionProvider(mock_config.llm, reply=make_reply(storyboard_data))

        StoryboardPipeline(mock_config, provider=provider).run(research_file, tmp_path / "out")

        assert provider.prompts[0].startswith("CUSTOM\n# AI in Daily Life")

    def test_progress_callback(self, mock_config, research_file, tmp_path, storyboard_data, make_reply):
        """The progress callback sees each stage."""
        stages = []
        pipeline = make_pipeline(mock_config, make_reply(storyboard_data))
        pipeline.set_progress_callback(stages.append)

        pipeline.run(research_file, tmp_path / "out")

        assert stages[0] == "read"
        assert stages[-1] == "emit"


class TestPipelineWarnings:
    """Non-fatal findings let the run complete."""

    def test_duration_mismatch_still_writes_files(
        self, mock_config, research_file, tmp_path, storyboard_data, make_reply
    ):
        """Durations [20, 25, 15] against a declared 50 warn but finish."""
        data = copy.deepcopy(storyboard_data)
        data["meta"]["totalDurationSec"] = 50
        output_dir = tmp_path / "out"

        result = make_pipeline(mock_config, make_reply(data)).run(research_file, output_dir)

        assert [f.code for f in result.findings] == ["duration_mismatch"]
        assert (output_dir / "storyboard.json").exists()
        assert (output_dir / "Video.tsx").exists()
        assert len(list((output_dir / "public" / "voiceovers").iterdir())) == 3

    def test_fail_on_findings_escalates(
        self, mock_config, research_file, tmp_path, storyboard_data, make_reply
    ):
        """With fail_on_findings, a warning stops the run before emitting."""
        data = copy.deepcopy(storyboard_data)
        data["meta"]["totalDurationSec"] = 50
        mock_config.validation.fail_on_findings = True
        output_dir = tmp_path / "out"

        with pytest.raises(FindingsError):
            make_pipeline(mock_config, make_reply(data)).run(research_file, output_dir)

        assert not output_dir.exists()

    def test_missing_meta_skips_video(self, mock_config, research_file, tmp_path, storyboard_data, make_reply):
        """Absent meta degrades to a skipped Video.tsx."""
        data = copy.deepcopy(storyboard_data)
        del data["meta"]
        output_dir = tmp_path / "out"

        result = make_pipeline(mock_config, make_reply(data)).run(research_file, output_dir)

        assert result.artifacts.composition_path is None
        assert not (output_dir / "Video.tsx").exists()
        assert (output_dir / "storyboard.json").exists()


class TestPipelineFailures:
    """Fatal errors propagate and leave no output behind."""

    def test_missing_json_block(self, mock_config, research_file, tmp_path):
        """A reply without a JSON fence fails and writes nothing."""
        output_dir = tmp_path / "out"
        pipeline = make_pipeline(mock_config, "```yaml\nmeta: {}\n```\nNo JSON, sorry.")

        with pytest.raises(ExtractionError):
            pipeline.run(research_file, output_dir)

        assert not output_dir.exists()

    def test_invalid_json(self, mock_config, research_file, tmp_path):
        """Unparseable JSON fails before any artifact is emitted."""
        output_dir = tmp_path / "out"
        pipeline = make_pipeline(mock_config, "```yaml\na: 1\n```\n```json\n{broken\n```\n")

        with pytest.raises(ParseError):
            pipeline.run(research_file, output_dir)

        assert not output_dir.exists()

    def test_duplicate_slide_ids(self, mock_config, research_file, tmp_path, storyboard_data, make_reply):
        """Duplicate ids fail before any placeholder is written."""
        data = copy.deepcopy(storyboard_data)
        data["slides"][1]["id"] = "intro"
        output_dir = tmp_path / "out"

        with pytest.raises(ParseError, match="intro"):
            make_pipeline(mock_config, make_reply(data)).run(research_file, output_dir)

        assert not output_dir.exists()

    def test_missing_input_file(self, mock_config, tmp_path):
        """A missing input file fails before the completion call."""
        provider = MockCompletionProvider(mock_config.llm)
        pipeline = StoryboardPipeline(mock_config, provider=provider)

        with pytest.raises(FileNotFoundError):
            pipeline.run(tmp_path / "missing.md", tmp_path / "out")

        assert provider.prompts == []

    def test_missing_credential_makes_no_network_call(self, monkeypatch, research_file, tmp_path):
        """Without an API key the run fails with zero requests sent."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        config = Config()
        provider = OpenAICompletionProvider(config.llm, transport=httpx.MockTransport(handler))
        output_dir = tmp_path / "out"

        with pytest.raises(ConfigurationError):
            StoryboardPipeline(config, provider=provider).run(research_file, output_dir)

        assert calls == []
        assert not output_dir.exists()

    def test_service_error_propagates(self, monkeypatch, research_file, tmp_path):
        """A non-success status surfaces as ServiceError."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        transport = httpx.MockTransport(lambda request: httpx.Response(400, text="bad request"))
        config = Config()
        provider = OpenAICompletionProvider(config.llm, transport=transport)

        with pytest.raises(ServiceError) as exc_info:
            StoryboardPipeline(config, provider=provider).run(research_file, tmp_path / "out")

        assert exc_info.value.status_code == 400
