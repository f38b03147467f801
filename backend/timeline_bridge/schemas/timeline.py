from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from timeline_bridge.schemas.overlay_config import CamelModel


class OverlayType(str, Enum):
    video = "video"
    text = "text"
    caption = "caption"
    image = "image"
    sound = "sound"
    shape = "shape"


class CaptionWord(CamelModel):
    word: str
    start_ms: float
    end_ms: float
    confidence: float = 1.0


class Caption(CamelModel):
    """One cue. Millisecond offsets are relative to the owning entry's start."""

    text: str
    start_ms: float
    end_ms: float
    timestamp_ms: float
    confidence: float = 1.0
    words: List[CaptionWord] = Field(default_factory=list)


class TimelineOverlay(CamelModel):
    # Editor-specific fields we do not know about are passed through
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    # Editor-minted ids may be fractional
    id: Union[int, float]
    type: OverlayType
    content: str = ""
    from_: int = Field(0, alias="from")
    duration_in_frames: int
    left: float = 0
    top: float = 0
    width: float = 0
    height: float = 0
    row: int = 0
    is_dragging: bool = False
    rotation: float = 0
    styles: Dict[str, Any] = Field(default_factory=dict)

    src: Optional[str] = None            # video, image, sound
    captions: Optional[List[Caption]] = None  # caption
    template: Optional[str] = None       # caption

    @property
    def end(self) -> int:
        return self.from_ + self.duration_in_frames

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
