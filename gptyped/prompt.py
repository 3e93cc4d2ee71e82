"""
Prompt assembly. Prompt discipline: the descriptor tells the model the shape, the validator enforces it.
"""
from __future__ import annotations

import json
from typing import Any, Mapping

from pydantic_core import to_jsonable_python

MEMORY_PREFIX = "Consider this context for your response: "
OUTPUT_LABEL = "output = "
INPUT_LABEL = "input = "
JSON_ONLY_DIRECTIVE = "[JSON ONLY]"
JSON_INDENT = 4


def to_json(value: Any) -> str:
    """Indented JSON; non-ASCII kept verbatim, models/dataclasses/dates serialized via pydantic."""
    return json.dumps(value, indent=JSON_INDENT, ensure_ascii=False, default=to_jsonable_python)


def build_prompt(
    payload: Any,
    descriptor: Mapping[str, Any],
    *,
    metaprompt: str | None = None,
    reminder: str | None = None,
    memory: str | None = None,
) -> str:
    """
    Assemble the full prompt text. Deterministic: no I/O, same arguments give the same string.

    Layout:
        <metaprompt>
        Consider this context for your response: <memory>
        <reminder>

        output = <descriptor as JSON>

        input = <payload as JSON>

        [JSON ONLY]
    Absent (or empty) fragments are left out entirely.
    """
    header = ""
    if metaprompt:
        header += metaprompt + "\n"
    if memory:
        header += MEMORY_PREFIX + memory + "\n"
    if reminder:
        header += reminder + "\n"

    return (
        f"{header}\n"
        f"{OUTPUT_LABEL}{to_json(descriptor)}\n"
        f"\n"
        f"{INPUT_LABEL}{to_json(payload)}\n"
        f"\n"
        f"{JSON_ONLY_DIRECTIVE}\n"
    )
