import math
from itertools import count
from typing import NamedTuple, Optional


class Placement(NamedTuple):
    from_frame: int
    duration_in_frames: int


def seconds_to_frames(sec: float, fps: float) -> int:
    # Half-up rounding; round() would send 2.5 frames to 2
    return int(math.floor(sec * fps + 0.5))


def frames_to_seconds(frames: float, fps: float) -> float:
    return frames / fps


def clamp_timing(from_frame: int, duration: int, total_frames: int) -> Optional[Placement]:
    """
    Confine an overlay window to [0, total_frames).

    Returns None when the window starts at or past the end of the timeline;
    callers must skip the overlay rather than emit an empty or negative window.
    """
    clamped_from = max(0, from_frame)
    if clamped_from >= total_frames:
        return None
    clamped_duration = max(1, min(duration, total_frames - clamped_from))
    return Placement(clamped_from, clamped_duration)


class IdAllocator:
    """Monotonic integer ids, scoped to whoever owns the allocator."""

    # Editor-created overlays use small ids
    DEFAULT_START = 1000

    def __init__(self, start: int = DEFAULT_START):
        self._counter = count(start)

    def __call__(self) -> int:
        return next(self._counter)
