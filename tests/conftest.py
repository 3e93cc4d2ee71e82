from __future__ import annotations

import pytest

from tests.fakes import RecordingSink, ScriptedTransport


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def make_transport():
    return ScriptedTransport
