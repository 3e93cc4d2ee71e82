"""
Isolated LLM boundary. A transport takes the finished prompt and returns the model's raw text;
network, auth, retries and timeouts all live on this side of the boundary.
"""
from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Protocol, Union, runtime_checkable

from gptyped.errors import ConfigurationError, TransportFailure

SendFunction = Callable[[str], Union[str, Awaitable[str]]]


@runtime_checkable
class TextTransport(Protocol):
    """Send text, get text back."""

    async def send_text(self, prompt: str) -> str:
        ...


class CallableTransport:
    """Wrap a plain send function (sync or async) as a TextTransport.

    Exceptions raised by the function are not caught here.
    """

    def __init__(self, send_function: SendFunction) -> None:
        if not callable(send_function):
            raise ConfigurationError(f"send function must be callable, got {type(send_function).__name__}")
        self._send_function = send_function

    async def send_text(self, prompt: str) -> str:
        reply = self._send_function(prompt)
        if inspect.isawaitable(reply):
            reply = await reply
        if not isinstance(reply, str):
            raise TransportFailure(f"Transport returned {type(reply).__name__}, expected str")
        return reply

    def __repr__(self) -> str:
        name = getattr(self._send_function, "__qualname__", repr(self._send_function))
        return f"CallableTransport({name})"


def as_transport(obj: Any) -> TextTransport:
    if isinstance(obj, TextTransport):
        return obj
    if callable(obj):
        return CallableTransport(obj)
    raise ConfigurationError(f"Expected a TextTransport or a send function, got {type(obj).__name__}")
