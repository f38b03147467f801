from fastapi import APIRouter

from timeline_bridge.core.config import get_settings
from timeline_bridge.schemas.bridge import (
    AppendClipRequest,
    AppendClipResponse,
    ForwardRequest,
    ForwardResponse,
    ReverseRequest,
    ReverseResponse,
)
from timeline_bridge.services.clip_append import append_clip
from timeline_bridge.services.forward_bridge import config_to_timeline
from timeline_bridge.services.reverse_bridge import timeline_to_config
from timeline_bridge.services.timing import seconds_to_frames

router = APIRouter()
settings = get_settings()


@router.post(
    "/timeline/forward",
    response_model=ForwardResponse,
    response_model_exclude_none=True,
)
def forward_timeline(body: ForwardRequest):
    """
    Expand a declarative overlay config into editor timeline overlays.
    - `config`: OverlayConfig (every field optional)
    - `videoUrl` / `durationSec`: the base clip
    - `fps`: defaults to the server's DEFAULT_FPS
    """
    fps = body.fps or settings.DEFAULT_FPS
    overlays = config_to_timeline(body.config, body.video_url, body.duration_sec, fps)
    return ForwardResponse(
        overlays=overlays,
        total_frames=seconds_to_frames(body.duration_sec, fps),
    )


@router.post(
    "/timeline/reverse",
    response_model=ReverseResponse,
    response_model_exclude_none=True,
)
def reverse_timeline(body: ReverseRequest):
    """
    Rebuild an overlay config from edited timeline overlays.
    `existingConfig` supplies fields the timeline cannot carry (style, colours, animations).
    """
    fps = body.fps or settings.DEFAULT_FPS
    config = timeline_to_config(body.overlays, body.existing_config, fps)
    return ReverseResponse(config=config)


@router.post(
    "/timeline/append-clip",
    response_model=AppendClipResponse,
    response_model_exclude_none=True,
)
def append_clip_route(body: AppendClipRequest):
    fps = body.fps or settings.DEFAULT_FPS
    overlays = append_clip(
        body.overlays,
        body.video_url,
        body.duration_sec,
        body.overlay_config,
        fps,
    )
    return AppendClipResponse(overlays=overlays)
