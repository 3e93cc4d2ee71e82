"""
Reply clean-up before JSON parsing: typographic quote normalization and fenced code block extraction.
"""
from __future__ import annotations

import re
from typing import Callable, Optional

# Opening fence with optional language tag, body, closing fence. Non-greedy: the first block wins.
CODE_BLOCK_PATTERN = re.compile(r"```[\s\S]*?\n([\s\S]*?)\n```")

_SMART_QUOTES = str.maketrans(
    {
        "‘": '"',
        "’": '"',
        "“": '"',
        "”": '"',
    }
)

CodeBlockParser = Callable[[str], Optional[str]]


def sanitize_quotes(text: str) -> str:
    """Replace left/right single and double typographic quotes with a plain double quote."""
    return text.translate(_SMART_QUOTES)


def extract_code_block(text: str) -> str | None:
    """
    Return the stripped body of the first fenced code block, or None when there is none.
    An empty block returns "" so callers can tell it apart from a missing one.
    """
    match = CODE_BLOCK_PATTERN.search(text)
    if match is None:
        return None
    return match.group(1).strip()
