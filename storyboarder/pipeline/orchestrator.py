"""Storyboard pipeline orchestrator."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from rich.console import Console
from rich.markup import escape

from ..completion import CompletionProvider, get_completion_provider
from ..config import Config, load_config
from ..emitter import EmitResult, emit_artifacts
from ..extraction import Finding, StoryboardValidator, extract_blocks
from ..models import Storyboard
from ..prompts import compose_prompt, load_prompt_template

console = Console()


@dataclass
class PipelineResult:
    """Result of one storyboard run."""

    storyboard: Storyboard
    artifacts: EmitResult
    stages_completed: list[str]
    findings: list[Finding] = field(default_factory=list)


class StoryboardPipeline:
    """Turn a research file into storyboard artifacts.

    Stages run strictly in order: read, prompt, complete, extract, validate,
    emit. Any error propagates to the caller. The output directory is only
    created at the emit stage, so a failed run leaves nothing behind.
    """

    def __init__(
        self,
        config: Config | None = None,
        provider: CompletionProvider | None = None,
    ):
        """Initialize the pipeline.

        Args:
            config: Configuration object. If None, loads from config.yaml.
            provider: Completion provider. If None, creates one from config.
        """
        self.config = config or load_config()
        self.provider = provider or get_completion_provider(self.config)
        self.validator = StoryboardValidator(
            mode=self.config.validation.mode,
            duration_tolerance=self.config.validation.duration_tolerance_sec,
        )

        self._progress_callback: Callable[[str], None] | None = None

    def set_progress_callback(self, callback: Callable[[str], None]) -> None:
        """Set a callback called with each stage name as it completes."""
        self._progress_callback = callback

    def _report_progress(self, stage: str, stages_completed: list[str]) -> None:
        stages_completed.append(stage)
        if self._progress_callback:
            self._progress_callback(stage)

    def run(self, input_path: Path | str, output_dir: Path | str) -> PipelineResult:
        """Run the full pipeline.

        Args:
            input_path: Research text file
            output_dir: Destination directory, created if missing

        Returns:
            PipelineResult with the storyboard, written paths and findings

        Raises:
            FileNotFoundError: If the input file does not exist
            StoryboarderError: Any configuration, service, extraction or
                parse failure, or findings when ``fail_on_findings`` is set
        """
        stages_completed: list[str] = []

        research = Path(input_path).read_text(encoding="utf-8")
        self._report_progress("read", stages_completed)

        template = load_prompt_template(self.config.prompt.template_path)
        prompt = compose_prompt(research, template)
        self._report_progress("prompt", stages_completed)

        console.print(f"[bold]Sending prompt to {self.config.llm.model}...[/bold]")
        reply = self.provider.complete(prompt)
        console.print("Received response from completion service")
        self._report_progress("completion", stages_completed)

        blocks = extract_blocks(reply)
        self._report_progress("extraction", stages_completed)

        result = self.validator.validate(blocks)
        for finding in result.findings:
            console.print(f"[yellow]Warning:[/yellow] {escape(finding.message)}")
        if self.config.validation.fail_on_findings:
            result.raise_for_findings()
        self._report_progress("validation", stages_completed)

        artifacts = emit_artifacts(blocks, result, output_dir, self.config.video)
        console.print(f"Wrote storyboard.yaml and storyboard.json to {output_dir}")
        if artifacts.composition_path:
            console.print(f"Wrote Remotion component to {artifacts.composition_path}")
        console.print(
            f"Wrote {len(artifacts.voiceover_paths)} placeholder voiceover files"
        )
        if artifacts.summary_path:
            console.print(f"Wrote execution summary to {artifacts.summary_path}")
        self._report_progress("emit", stages_completed)

        console.print("[green]Done.[/green]")
        return PipelineResult(
            storyboard=result.storyboard,
            artifacts=artifacts,
            stages_completed=stages_completed,
            findings=result.findings,
        )
