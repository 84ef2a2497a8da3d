"""Prompt templates and composition."""

from .storyboard import (
    RESEARCH_PLACEHOLDER,
    STORYBOARD_PROMPT_TEMPLATE,
    compose_prompt,
    load_prompt_template,
)

__all__ = [
    "RESEARCH_PLACEHOLDER",
    "STORYBOARD_PROMPT_TEMPLATE",
    "compose_prompt",
    "load_prompt_template",
]
