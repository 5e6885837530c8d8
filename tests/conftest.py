"""
tests.conftest
~~~~~~~~~~~~~~

Shared fixtures: a deterministic clock and a fully wired service graph
whose connections record what they receive.
"""
from __future__ import annotations

import random
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from chatrooms.core.state import ChatState
from chatrooms.main import create_app
from chatrooms.services.room_directory import RoomDirectory
from tests.fakes import FakeClock, FakeConnection


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def directory(clock: FakeClock) -> RoomDirectory:
    return RoomDirectory(clock=clock, rng=random.Random(1234))


@pytest.fixture()
def chat(directory: RoomDirectory) -> ChatState:
    return ChatState(room_directory=directory)


@pytest.fixture()
def connect(chat: ChatState) -> Callable[..., FakeConnection]:
    """Factory: open a FakeConnection (or subclass) against ``chat``."""

    def _connect(connection_id: str, cls: type = FakeConnection) -> FakeConnection:
        connection = cls(connection_id)
        chat.lifecycle.on_connect(connection)
        return connection

    return _connect


@pytest.fixture()
def client(chat: ChatState) -> Iterator[TestClient]:
    """HTTP/WebSocket client against an app that owns ``chat``."""
    with TestClient(create_app(chat)) as test_client:
        yield test_client
