"""Pipeline orchestration for storyboard generation."""

from .orchestrator import PipelineResult, StoryboardPipeline

__all__ = ["PipelineResult", "StoryboardPipeline"]
