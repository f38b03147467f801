from typing import List, Optional, Sequence

from loguru import logger

from timeline_bridge.schemas.overlay_config import OverlayConfig
from timeline_bridge.schemas.timeline import OverlayType, TimelineOverlay
from timeline_bridge.services.forward_bridge import clip_scoped, config_to_timeline, video_entry
from timeline_bridge.services.timing import IdAllocator, seconds_to_frames


def append_clip(
    overlays: Sequence[TimelineOverlay],
    video_url: str,
    duration_sec: float,
    overlay_config: Optional[OverlayConfig] = None,
    fps: int = 30,
    ids: Optional[IdAllocator] = None,
) -> List[TimelineOverlay]:
    """
    Add a clip right after the last video on an open timeline.

    The clip's own overlay config (hook, captions, CTA...) is expanded and
    shifted onto the clip's start frame, so saving the timeline afterwards
    records it as that appended clip's nested config.
    """
    videos = [o for o in overlays if o.type == OverlayType.video]
    start = max((v.end for v in videos), default=0)
    if videos:
        row = max(videos, key=lambda v: v.from_).row
    else:
        row = max((o.row for o in overlays), default=-1) + 1

    if ids is None:
        taken = max((o.id for o in overlays), default=0)
        ids = IdAllocator(max(int(taken) + 1, IdAllocator.DEFAULT_START))

    muted = any(o.type == OverlayType.sound for o in overlays)
    clip_frames = seconds_to_frames(duration_sec, fps)
    result = list(overlays)
    result.append(video_entry(ids(), video_url, start, clip_frames, row, muted))

    if overlay_config:
        for sub in config_to_timeline(clip_scoped(overlay_config), video_url, duration_sec, fps, ids):
            if sub.type == OverlayType.video:
                continue
            result.append(sub.model_copy(update={"from_": sub.from_ + start, "id": ids()}))

    logger.debug(f"Appended {video_url} at frame {start} ({clip_frames} frames)")
    return result
