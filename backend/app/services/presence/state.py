import threading
from typing import Optional

from .history import PathHistoryStore
from .identity import IdentityAllocator
from .rooms import DEFAULT_TRAIL_LENGTH, RoomRegistry


class PresenceState:
    """Owns the allocator, the live room registry and the path history.

    One instance is created per application by ``create_app`` and handed to
    the socket handlers; only those handlers mutate it. Hold ``lock`` for an
    event's whole read-modify-emit sequence.
    """

    def __init__(self, trail_length: int = DEFAULT_TRAIL_LENGTH, allocator: Optional[IdentityAllocator] = None):
        self.lock = threading.RLock()
        self.identities = allocator or IdentityAllocator()
        self.rooms = RoomRegistry(self.identities, trail_length=trail_length)
        self.history = PathHistoryStore()

    def stats(self) -> dict:
        with self.lock:
            return {
                'rooms': self.rooms.room_count(),
                'totalUsers': self.rooms.user_count(),
            }
