"""Storyboarder - turns research text into Remotion-ready storyboards."""

__version__ = "0.1.0"
