from __future__ import annotations

import asyncio

import pytest

from gptyped.errors import ConfigurationError, FailureKind, TransportFailure
from gptyped.transport import CallableTransport, TextTransport, as_transport
from tests.fakes import ScriptedTransport


def test_sync_function_is_adapted():
    transport = CallableTransport(lambda prompt: prompt.upper())
    assert asyncio.run(transport.send_text("hi")) == "HI"


def test_async_function_is_adapted():
    async def send(prompt: str) -> str:
        await asyncio.sleep(0)
        return prompt[::-1]

    transport = CallableTransport(send)
    assert asyncio.run(transport.send_text("abc")) == "cba"


def test_non_string_reply_is_transport_failure():
    transport = CallableTransport(lambda prompt: None)
    with pytest.raises(TransportFailure) as exc_info:
        asyncio.run(transport.send_text("x"))
    assert exc_info.value.failure_type is FailureKind.TRANSPORT_FAILURE
    assert "NoneType" in exc_info.value.reason


def test_function_errors_propagate_unchanged():
    boom = ConnectionError("network down")

    def send(prompt: str) -> str:
        raise boom

    with pytest.raises(ConnectionError) as exc_info:
        asyncio.run(CallableTransport(send).send_text("x"))
    assert exc_info.value is boom


def test_transport_failure_http_status():
    assert TransportFailure("rate limited", status_code=429).is_http_error
    assert not TransportFailure("dns").is_http_error


def test_as_transport():
    scripted = ScriptedTransport("{}")
    assert isinstance(scripted, TextTransport)
    assert as_transport(scripted) is scripted
    assert isinstance(as_transport(lambda p: p), CallableTransport)
    with pytest.raises(ConfigurationError):
        as_transport("not callable")
    with pytest.raises(ConfigurationError):
        CallableTransport(42)
