from typing import List, Optional

from pydantic import Field

from timeline_bridge.schemas.overlay_config import CamelModel, OverlayConfig
from timeline_bridge.schemas.timeline import TimelineOverlay


class ForwardRequest(CamelModel):
    config: OverlayConfig = Field(default_factory=OverlayConfig)
    video_url: str
    duration_sec: float = Field(..., gt=0)
    fps: Optional[int] = Field(None, gt=0)


class ForwardResponse(CamelModel):
    overlays: List[TimelineOverlay]
    total_frames: int


class ReverseRequest(CamelModel):
    overlays: List[TimelineOverlay]
    existing_config: Optional[OverlayConfig] = None
    fps: Optional[int] = Field(None, gt=0)


class ReverseResponse(CamelModel):
    config: OverlayConfig


class AppendClipRequest(CamelModel):
    overlays: List[TimelineOverlay]
    video_url: str
    duration_sec: float = Field(..., gt=0)
    overlay_config: Optional[OverlayConfig] = None
    fps: Optional[int] = Field(None, gt=0)


class AppendClipResponse(CamelModel):
    overlays: List[TimelineOverlay]


class TimelineSaveRequest(CamelModel):
    overlays: List[TimelineOverlay]
    fps: Optional[int] = Field(None, gt=0)
