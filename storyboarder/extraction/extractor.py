"""Locate the fenced storyboard blocks inside a completion reply."""

import re
from dataclasses import dataclass

from ..errors import ExtractionError

# Non-greedy: the first block of each kind wins
YAML_BLOCK_PATTERN = re.compile(r"```ya?ml[ \t]*\r?\n([\s\S]+?)```")
JSON_BLOCK_PATTERN = re.compile(r"```json[ \t]*\r?\n([\s\S]+?)```")


@dataclass
class ExtractedBlocks:
    """Raw text of the blocks found in a reply."""

    yaml_text: str
    json_text: str
    summary: str = ""


def extract_blocks(reply: str) -> ExtractedBlocks:
    """Extract the YAML block, the JSON block and the trailing summary.

    Args:
        reply: Raw reply text from the completion service

    Returns:
        ExtractedBlocks with fence markers removed and whitespace trimmed.
        ``summary`` is everything after the JSON block, possibly empty.

    Raises:
        ExtractionError: If either block is missing
    """
    yaml_match = YAML_BLOCK_PATTERN.search(reply)
    json_match = JSON_BLOCK_PATTERN.search(reply)

    if not yaml_match:
        raise ExtractionError("Unable to find YAML block in response")
    if not json_match:
        raise ExtractionError("Unable to find JSON block in response")

    return ExtractedBlocks(
        yaml_text=yaml_match.group(1).strip(),
        json_text=json_match.group(1).strip(),
        summary=reply[json_match.end():].strip(),
    )
