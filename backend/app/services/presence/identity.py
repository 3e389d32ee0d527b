import logging
import random
from typing import Dict, Optional, Set

logger = logging.getLogger(__name__)

# Highlight colors and the instrument each one plays. Two colors may share
# an instrument.
COLOR_INSTRUMENTS: Dict[str, str] = {
    '#970302': 'AMSynth',        # Red
    '#E679A6': 'DuoSynth',       # Pink
    '#EE8019': 'FMSynth',        # Orange
    '#F0BC00': 'MembraneSynth',  # Yellow
    '#5748B5': 'PolySynth',      # Purple
    '#305D70': 'MonoSynth',      # Dark green
    '#0E65C0': 'NoiseSynth',     # Blue
    '#049DFF': 'PluckSynth',     # Bright blue
    '#E9E7C4': 'PolySynth',      # Bright yellow
    '#308557': 'Synth',          # Green
    '#71D1B3': 'FMSynth',        # Bright green
}


class IdentityAllocator:
    """Hands out per-room colors from a fixed palette.

    While the palette has unused colors, no two participants of the same
    room share one. Once every color is taken, a random palette color is
    reused instead of failing.
    """

    def __init__(self, palette: Optional[Dict[str, str]] = None, rng: Optional[random.Random] = None):
        self.palette = dict(palette or COLOR_INSTRUMENTS)
        self._rng = rng or random.Random()
        self._used: Dict[str, Set[str]] = {}

    def allocate(self, room_id: str) -> str:
        used = self._used.setdefault(room_id, set())
        available = [c for c in self.palette if c not in used]
        if available:
            color = self._rng.choice(available)
            used.add(color)
            return color
        color = self._rng.choice(list(self.palette))
        logger.info(f"[palette-exhausted] room={room_id} reusing color={color}")
        return color

    def release(self, room_id: str, color: Optional[str]) -> None:
        used = self._used.get(room_id)
        if used is not None and color is not None:
            used.discard(color)

    def forget_room(self, room_id: str) -> None:
        self._used.pop(room_id, None)

    def used_colors(self, room_id: str) -> Set[str]:
        return set(self._used.get(room_id, ()))

    def has_room(self, room_id: str) -> bool:
        return room_id in self._used

    def companion_tag_for(self, color: str) -> str:
        return self.palette[color]
