"""
tests.test_discovery
~~~~~~~~~~~~~~~~~~~~

DiscoveryService defaults and delegation.
"""
from __future__ import annotations

import pytest

from chatrooms.services.discovery import DiscoveryService
from chatrooms.services.room_directory import NoPublicRoomsError, RoomDirectory


class TestCreateRoom:

    def test_defaults(self, directory: RoomDirectory) -> None:
        room = DiscoveryService(directory).create_room()

        assert room.name == "Untitled Room"
        assert room.is_public is True
        assert room.member_count == 0
        assert directory.get_room(room.id) == room

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name_is_kept(self, directory: RoomDirectory, name: str) -> None:
        assert DiscoveryService(directory).create_room(name=name).name == name

    def test_private_room(self, directory: RoomDirectory) -> None:
        room = DiscoveryService(directory).create_room("Secret", is_public=False)
        assert room.is_public is False


class TestQueries:

    def test_list_excludes_private_and_orders_newest_first(self, directory: RoomDirectory) -> None:
        discovery = DiscoveryService(directory)
        a = discovery.create_room("A")
        discovery.create_room("Hidden", is_public=False)
        b = discovery.create_room("B")

        assert [r.id for r in discovery.list_public_rooms()] == [b.id, a.id]

    def test_random_on_empty_raises(self, directory: RoomDirectory) -> None:
        with pytest.raises(NoPublicRoomsError):
            DiscoveryService(directory).random_public_room()

    def test_random_with_single_public_room(self, directory: RoomDirectory) -> None:
        discovery = DiscoveryService(directory)
        room = discovery.create_room("Only")
        assert discovery.random_public_room() == room
