from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Literal, Optional


Animation = Literal["pop", "fade", "slide"]
TextPosition = Literal["top", "center", "bottom"]
GraphicPosition = Literal["top_left", "top_right", "bottom_left", "bottom_right", "center"]
GraphicType = Literal["logo", "badge", "watermark", "lower_third"]
OverlayStyle = Literal["capcut", "minimal", "bold", "clean"]


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON (the persisted config shape)."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class HookOverlay(CamelModel):
    line1: str
    line2: Optional[str] = None
    line2_color: Optional[str] = None
    start_sec: float
    end_sec: float
    animation: Animation = "pop"
    font_size: Optional[int] = None      # renderer default 52
    font_weight: Optional[int] = None    # renderer default 800
    position: Optional[TextPosition] = None  # renderer default "top"


class CaptionOverlay(CamelModel):
    text: str
    start_sec: float
    end_sec: float
    highlight: Optional[bool] = None
    highlight_word: Optional[str] = None
    font_size: Optional[int] = None      # renderer default 36
    font_weight: Optional[int] = None    # renderer default 600
    position: Optional[TextPosition] = None  # renderer default "bottom"


class CTAOverlay(CamelModel):
    button_text: str
    brand_name: Optional[str] = None
    url: Optional[str] = None
    button_color: Optional[str] = None
    start_sec: float                     # runs until the end of the video
    animation: Animation = "pop"
    font_size: Optional[int] = None      # renderer default 32


class GraphicOverlay(CamelModel):
    type: GraphicType = "logo"
    image_url: Optional[str] = None
    text: Optional[str] = None
    position: GraphicPosition = "center"
    start_sec: float
    end_sec: float
    opacity: Optional[float] = None


class EndCardOverlay(CamelModel):
    duration_sec: float
    background_color: str                # e.g. "#000000"
    text: Optional[str] = None           # e.g. "Shop Now at example.com"
    text_color: Optional[str] = None     # renderer default "#FFFFFF"
    font_size: Optional[int] = None      # renderer default 48


class ClipSegment(CamelModel):
    start_frame: int
    end_frame: int
    speed: Optional[float] = None


class VideoClipEdit(CamelModel):
    """Persisted cut/trim state of one clip. Carried through untouched."""

    video_url: str
    from_frame: int
    duration_frames: int
    video_start_time: Optional[float] = None
    speed: Optional[float] = None
    segments: Optional[List[ClipSegment]] = None
    media_src_duration: Optional[float] = None
    volume: Optional[float] = None


class AppendedClip(CamelModel):
    video_url: str
    duration_seconds: float
    from_frame: int
    # Scoped to this clip's own duration; times are clip-relative
    overlay_config: Optional["OverlayConfig"] = None


class OverlayConfig(CamelModel):
    hook: Optional[HookOverlay] = None
    captions: Optional[List[CaptionOverlay]] = None
    cta: Optional[CTAOverlay] = None
    graphics: Optional[List[GraphicOverlay]] = None
    end_card: Optional[EndCardOverlay] = None
    style: OverlayStyle = "clean"
    brand_color: Optional[str] = None
    accent_color: Optional[str] = None
    voiceover_url: Optional[str] = None
    appended_clips: Optional[List[AppendedClip]] = None
    video_clips: Optional[List[VideoClipEdit]] = None

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


AppendedClip.model_rebuild()
