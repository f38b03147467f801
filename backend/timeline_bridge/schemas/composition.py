from datetime import datetime
from typing import List, Optional

from timeline_bridge.schemas.overlay_config import CamelModel, OverlayConfig


class CompositionCreate(CamelModel):
    canvas_id: str
    source_job_ids: List[str]
    video_url: str
    overlay_config: OverlayConfig
    title: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration_seconds: Optional[float] = None


class CompositionUpdate(CamelModel):
    source_job_ids: Optional[List[str]] = None
    video_url: Optional[str] = None
    overlay_config: Optional[OverlayConfig] = None
    title: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration_seconds: Optional[float] = None


class CompositionBase(CamelModel):
    id: str
    canvas_id: str
    source_job_ids: List[str]
    video_url: str
    overlay_config: OverlayConfig
    title: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration_seconds: Optional[float] = None
    created_at: datetime
    updated_at: datetime


class CompositionCreateResponse(CamelModel):
    composition_id: str
