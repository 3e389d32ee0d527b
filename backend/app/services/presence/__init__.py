"""Presence domain services: identity allocation, live rooms and path history.

Socket handlers import from here; none of these modules know about
Socket.IO, so the room bookkeeping can be exercised without a transport.
"""

from .identity import COLOR_INSTRUMENTS, IdentityAllocator
from .rooms import Presence, RoomRegistry
from .history import PathHistoryStore
from .state import PresenceState

__all__ = [
    'COLOR_INSTRUMENTS',
    'IdentityAllocator',
    'Presence',
    'RoomRegistry',
    'PathHistoryStore',
    'PresenceState',
]
