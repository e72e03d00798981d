"""Strip Markdown formatting from uploaded .md files before reading."""

import re
from typing import List, Tuple

# Applied in order; fenced code goes first since it can contain anything.
_SUBSTITUTIONS: List[Tuple[re.Pattern, str]] = [
    # ```code```
    (re.compile(r"```[\s\S]*?```"), ""),
    # ![alt](url) - alt text reads badly out of context
    (re.compile(r"!\[([^\]]*)\]\([^)]+\)"), ""),
    # [text](url) -> text
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    # `code` -> code
    (re.compile(r"`([^`]+)`"), r"\1"),
    # ## Heading -> Heading
    (re.compile(r"^#{1,6}\s*", re.MULTILINE), ""),
    # **bold** / *italic* -> text
    (re.compile(r"\*{1,2}([^*]+)\*{1,2}"), r"\1"),
    # --- / *** rules
    (re.compile(r"^[-*_]{3,}\s*$", re.MULTILINE), ""),
    # > quote -> quote
    (re.compile(r"^>\s*", re.MULTILINE), ""),
    # - item / 1. item -> item
    (re.compile(r"^\s*[-*+]\s+", re.MULTILINE), ""),
    (re.compile(r"^\s*\d+\.\s+", re.MULTILINE), ""),
    # whitespace
    (re.compile(r"\n{3,}"), "\n\n"),
    (re.compile(r" +"), " "),
]


def strip_markdown(markdown_text: str) -> str:
    """
    Remove Markdown markup while keeping the readable text.

    Args:
        markdown_text: Raw markdown text.

    Returns:
        Plain text suitable for tokenizing.
    """
    text = markdown_text
    for pattern, replacement in _SUBSTITUTIONS:
        text = pattern.sub(replacement, text)
    return text.strip()
