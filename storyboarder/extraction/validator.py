"""Storyboard validation - parses the extracted blocks and checks consistency.

Fatal problems (invalid JSON, duplicate slide ids) raise. Everything else is
reported as a list of non-fatal findings returned alongside the storyboard,
so the caller decides whether a finding should stop the run.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import yaml
from pydantic import ValidationError

from ..errors import DuplicateSlideIdError, FindingsError, ParseError
from ..models import Storyboard, TransitionKind
from .extractor import ExtractedBlocks

DEFAULT_DURATION_TOLERANCE = 0.01


class ValidationMode(str, Enum):
    """How to treat a human-readable block that fails to parse."""

    STRICT = "strict"
    LENIENT = "lenient"


@dataclass
class Finding:
    """A single non-fatal validation finding."""

    code: str
    message: str
    slide_id: str | None = None


@dataclass
class ValidationResult:
    """Result of validating a storyboard reply."""

    storyboard: Storyboard
    data: dict[str, Any]
    findings: list[Finding] = field(default_factory=list)
    summary: str = ""

    @property
    def ok(self) -> bool:
        return not self.findings

    def codes(self) -> list[str]:
        return [f.code for f in self.findings]

    def raise_for_findings(self) -> None:
        """Escalate findings to a failure."""
        if self.findings:
            raise FindingsError(self.findings)


def canonicalize(value: Any) -> Any:
    """Round-trip a parsed structure through JSON.

    YAML-only types such as dates collapse to strings, so both sides of the
    comparison are plain JSON values.
    """
    return json.loads(json.dumps(value, default=str))


class StoryboardValidator:
    """Parses and checks the YAML/JSON pair returned by the completion service."""

    def __init__(
        self,
        mode: ValidationMode | str = ValidationMode.LENIENT,
        duration_tolerance: float = DEFAULT_DURATION_TOLERANCE,
    ):
        """Initialize the validator.

        Args:
            mode: ``strict`` fails on an unparseable YAML block, ``lenient``
                reports it as a finding and skips the equivalence check.
            duration_tolerance: Allowed difference in seconds between the
                declared total duration and the slide sum.
        """
        self.mode = ValidationMode(mode)
        self.duration_tolerance = duration_tolerance

    def validate(self, blocks: ExtractedBlocks) -> ValidationResult:
        """Validate extracted blocks.

        Args:
            blocks: Output of ``extract_blocks``

        Returns:
            ValidationResult with the parsed storyboard and any findings

        Raises:
            ParseError: If the JSON block is invalid, does not describe a
                storyboard, or (strict mode) the YAML block is invalid
            DuplicateSlideIdError: If two slides share an id
        """
        data = self.parse_json(blocks.json_text)
        storyboard = self.build_storyboard(data)
        self.check_slide_ids(storyboard)

        findings: list[Finding] = []

        yaml_data, yaml_findings = self.parse_yaml(blocks.yaml_text)
        findings.extend(yaml_findings)
        if not yaml_findings:
            findings.extend(self.check_equivalence(yaml_data, data))

        findings.extend(self.check_durations(storyboard))
        findings.extend(self.check_slides(storyboard))

        return ValidationResult(
            storyboard=storyboard,
            data=data,
            findings=findings,
            summary=blocks.summary,
        )

    def parse_json(self, text: str) -> dict[str, Any]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON returned by completion service: {e}") from e

        if not isinstance(data, dict):
            raise ParseError(
                f"Storyboard JSON must be an object, got {type(data).__name__}"
            )
        return data

    def parse_yaml(self, text: str) -> tuple[Any, list[Finding]]:
        """Parse the YAML block according to the validation mode."""
        try:
            return yaml.safe_load(text), []
        except yaml.YAMLError as e:
            if self.mode == ValidationMode.STRICT:
                raise ParseError(f"Invalid YAML returned by completion service: {e}") from e
            finding = Finding(
                code="yaml_unparseable",
                message=f"Failed to parse YAML, skipping structural check: {e}",
            )
            return None, [finding]

    def build_storyboard(self, data: dict[str, Any]) -> Storyboard:
        try:
            return Storyboard.model_validate(data)
        except ValidationError as e:
            raise ParseError(f"JSON does not describe a storyboard: {e}") from e

    def check_slide_ids(self, storyboard: Storyboard) -> None:
        """Slide ids must be unique and usable as file names."""
        seen: set[str] = set()
        for slide in storyboard.slides:
            slide_id = slide.id
            if not slide_id.strip() or slide_id in (".", "..") or any(
                sep in slide_id for sep in ("/", "\\")
            ):
                raise ParseError(f"Slide id is not a valid file name: {slide_id!r}")
            if slide_id in seen:
                raise DuplicateSlideIdError(slide_id)
            seen.add(slide_id)

    def check_equivalence(self, yaml_data: Any, json_data: dict[str, Any]) -> list[Finding]:
        if canonicalize(yaml_data) == canonicalize(json_data):
            return []
        return [
            Finding(
                code="structure_mismatch",
                message="YAML and JSON differ after normalisation.",
            )
        ]

    def check_durations(self, storyboard: Storyboard) -> list[Finding]:
        meta = storyboard.meta
        if meta is None:
            return [
                Finding(
                    code="missing_meta",
                    message="No meta field in storyboard; duration check skipped.",
                )
            ]
        if meta.total_duration_sec is None:
            return []

        total = storyboard.slide_duration_sum
        if abs(total - meta.total_duration_sec) > self.duration_tolerance:
            return [
                Finding(
                    code="duration_mismatch",
                    message=(
                        f"totalDurationSec ({meta.total_duration_sec:g}) does not match "
                        f"sum of slide durations ({total:g})."
                    ),
                )
            ]
        return []

    def check_slides(self, storyboard: Storyboard) -> list[Finding]:
        """Per-slide sanity checks on durations, element kinds and transitions."""
        findings: list[Finding] = []
        for slide in storyboard.slides:
            if slide.duration_sec <= 0:
                findings.append(
                    Finding(
                        code="non_positive_duration",
                        message=f"Slide {slide.id} has durationSec {slide.duration_sec:g}.",
                        slide_id=slide.id,
                    )
                )

            if not isinstance(slide.transition_to_next, TransitionKind):
                findings.append(
                    Finding(
                        code="unknown_transition",
                        message=f"Slide {slide.id} uses unknown transition {slide.transition_to_next!r}.",
                        slide_id=slide.id,
                    )
                )

            for index, element in enumerate(slide.elements):
                if not element.is_known_kind:
                    findings.append(
                        Finding(
                            code="unknown_element_kind",
                            message=f"Slide {slide.id} element {index} has unknown kind {element.kind!r}.",
                            slide_id=slide.id,
                        )
                    )
                if element.end_sec is not None and element.end_sec < element.start_sec:
                    findings.append(
                        Finding(
                            code="element_timing",
                            message=(
                                f"Slide {slide.id} element {index} ends ({element.end_sec:g}s) "
                                f"before it starts ({element.start_sec:g}s)."
                            ),
                            slide_id=slide.id,
                        )
                    )
        return findings
