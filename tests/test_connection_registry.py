"""
tests.test_connection_registry
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

ConnectionRegistry bookkeeping.
"""
from __future__ import annotations

from chatrooms.models.models import Membership
from chatrooms.services.connection_registry import ConnectionRegistry
from tests.fakes import FakeConnection


def make_registry(*connection_ids: str) -> ConnectionRegistry:
    registry = ConnectionRegistry()
    for connection_id in connection_ids:
        registry.add(FakeConnection(connection_id))
    return registry


def test_register_and_count() -> None:
    registry = make_registry("x", "y", "z")
    registry.register("x", "r1", "Alice")
    registry.register("y", "r1", "Bob")
    registry.register("z", "r2", "Carol")

    assert registry.count_in_room("r1") == 2
    assert registry.count_in_room("r2") == 1
    assert registry.count_in_room("nowhere") == 0
    assert registry.members_of("r1") == {"x", "y"}
    assert registry.membership("x") == Membership("r1", "Alice")


def test_register_again_moves_connection() -> None:
    registry = make_registry("x")
    registry.register("x", "r1", "Alice")

    previous = registry.register("x", "r2", "Alice")

    assert previous == Membership("r1", "Alice")
    assert registry.count_in_room("r1") == 0
    assert registry.members_of("r2") == {"x"}
    assert "r1" not in registry.active_room_ids


def test_unregister_returns_binding() -> None:
    registry = make_registry("x")
    registry.register("x", "r1", "Alice")

    assert registry.unregister("x") == Membership("r1", "Alice")
    assert registry.count_in_room("r1") == 0
    assert registry.membership("x") is None


def test_unregister_never_joined_returns_none() -> None:
    registry = make_registry("x")
    assert registry.unregister("x") is None
    assert registry.unregister("ghost") is None


def test_members_of_is_a_snapshot() -> None:
    registry = make_registry("x", "y")
    registry.register("x", "r1", "Alice")

    members = registry.members_of("r1")
    registry.register("y", "r1", "Bob")

    assert members == {"x"}


def test_discard_drops_transport_and_binding() -> None:
    registry = make_registry("x")
    registry.register("x", "r1", "Alice")

    registry.discard("x")

    assert registry.get("x") is None
    assert registry.connection_count == 0
    assert registry.count_in_room("r1") == 0
