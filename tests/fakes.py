from __future__ import annotations

from typing import Union

from pydantic import BaseModel

from gptyped.config import Stage

Reply = Union[str, BaseException]


class ScriptedTransport:
    """Replays canned replies (the last one repeats) and records every prompt it receives."""

    def __init__(self, *replies: Reply) -> None:
        if not replies:
            raise ValueError("at least one reply is required")
        self._replies = list(replies)
        self.prompts: list[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def send_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self._replies.pop(0) if len(self._replies) > 1 else self._replies[0]
        if isinstance(reply, BaseException):
            raise reply
        return reply


class RecordingSink:
    def __init__(self) -> None:
        self.events: list[tuple[Stage, str]] = []

    def __call__(self, stage: Stage, message: str) -> None:
        self.events.append((stage, message))

    @property
    def stages(self) -> list[Stage]:
        return [stage for stage, _ in self.events]


class Person(BaseModel):
    name: str
    age: int
    tags: list[str] = []


PERSON_DESCRIPTOR = {"name": "string", "age": "integer", "tags": ["string"]}

PERSON_JSON = '{"name": "Ada", "age": 36, "tags": ["math"]}'
