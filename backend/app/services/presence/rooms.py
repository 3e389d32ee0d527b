import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple

from .identity import IdentityAllocator

logger = logging.getLogger(__name__)

DEFAULT_TRAIL_LENGTH = 50


class Presence:
    """A connected participant's live state inside one room."""

    def __init__(self, connection_id: str, color: str, instrument: str, trail_length: int = DEFAULT_TRAIL_LENGTH):
        self.id = connection_id
        self.color = color
        self.instrument = instrument
        self.position = 0
        self.trail: Deque[int] = deque(maxlen=trail_length)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'color': self.color,
            'instrument': self.instrument,
            'position': self.position,
            'trail': list(self.trail),
        }


class RoomRegistry:
    """Active rooms and the presences inside them.

    A room is created by its first join and removed by the leave that
    empties it, together with its color bookkeeping in the allocator.
    """

    def __init__(self, allocator: IdentityAllocator, trail_length: int = DEFAULT_TRAIL_LENGTH):
        self.allocator = allocator
        self.trail_length = trail_length
        self._rooms: Dict[str, Dict[str, Presence]] = {}
        self._room_of: Dict[str, str] = {}

    def join(self, room_id: str, connection_id: str) -> Tuple[Dict[str, Presence], Presence]:
        previous = self._room_of.get(connection_id)
        if previous is not None:
            self.allocator.release(previous, self.leave(previous, connection_id))

        color = self.allocator.allocate(room_id)
        presence = Presence(
            connection_id,
            color,
            self.allocator.companion_tag_for(color),
            trail_length=self.trail_length,
        )
        room = self._rooms.setdefault(room_id, {})
        room[connection_id] = presence
        self._room_of[connection_id] = room_id
        return room, presence

    def move(self, room_id: str, connection_id: str, position: int) -> Optional[List[int]]:
        presence = self.get(room_id, connection_id)
        if presence is None:
            return None
        presence.position = position
        presence.trail.append(position)
        return list(presence.trail)

    def leave(self, room_id: str, connection_id: str) -> Optional[str]:
        room = self._rooms.get(room_id)
        if not room or connection_id not in room:
            return None
        presence = room.pop(connection_id)
        if self._room_of.get(connection_id) == room_id:
            del self._room_of[connection_id]
        if not room:
            del self._rooms[room_id]
            self.allocator.forget_room(room_id)
            logger.info(f"[room-empty] room={room_id} removed")
        else:
            logger.info(f"[room-size] room={room_id} users={len(room)}")
        return presence.color

    def get(self, room_id: str, connection_id: str) -> Optional[Presence]:
        return self._rooms.get(room_id, {}).get(connection_id)

    def room_of(self, connection_id: str) -> Optional[str]:
        return self._room_of.get(connection_id)

    def presences(self, room_id: str) -> Dict[str, Presence]:
        return dict(self._rooms.get(room_id, {}))

    def has_room(self, room_id: str) -> bool:
        return room_id in self._rooms

    def room_count(self) -> int:
        return len(self._rooms)

    def user_count(self) -> int:
        return sum(len(room) for room in self._rooms.values())
