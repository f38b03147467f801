"""
Flat editor timeline -> declarative OverlayConfig.

VIDEO entries sorted by start frame partition the timeline into clips: the
first is the base video, the rest become appended clips. Every other entry is
owned by the latest clip starting at or before its temporal midpoint. Tagged
entries are recovered exactly; untagged ones are inferred from their type and
geometry. Nothing here raises on odd input: an entry that cannot be read just
leaves its field empty, and fields the timeline cannot express fall back to
the previous config.
"""
import math
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from loguru import logger

from timeline_bridge.schemas.overlay_config import (
    AppendedClip,
    CaptionOverlay,
    CTAOverlay,
    EndCardOverlay,
    GraphicOverlay,
    HookOverlay,
    OverlayConfig,
)
from timeline_bridge.schemas.timeline import OverlayType, TimelineOverlay
from timeline_bridge.services import tags
from timeline_bridge.services.forward_bridge import DEFAULT_BRAND_COLOR
from timeline_bridge.services.positions import nearest_graphic_position, nearest_position
from timeline_bridge.services.timing import frames_to_seconds

_LEADING_INT = re.compile(r"\s*([-+]?\d+)")


@dataclass
class ClipRange:
    from_frame: int
    end: int
    src: str


@dataclass
class _ClipOverlays:
    hook: Optional[HookOverlay] = None
    captions: List[CaptionOverlay] = field(default_factory=list)
    cta: Optional[CTAOverlay] = None


def _parse_int(value, default: int) -> int:
    """Leading integer of "52px" / "800" / 600; `default` when absent or zero."""
    if isinstance(value, bool):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    if isinstance(value, (int, float)):
        return int(value) or default
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1)) or default
    return default


def _str_or_none(value) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _unless_filled_in(recovered, default, prev_obj, attr: str):
    """None when forward only substituted `default` for a field `prev_obj` left unset."""
    if prev_obj is not None and getattr(prev_obj, attr) is None and recovered == default:
        return None
    return recovered


def clip_ranges(overlays: Sequence[TimelineOverlay]) -> List[ClipRange]:
    videos = sorted(
        (o for o in overlays if o.type == OverlayType.video),
        key=lambda o: o.from_,
    )
    return [ClipRange(v.from_, v.end, v.src or v.content) for v in videos]


def clip_index(ranges: Sequence[ClipRange], from_frame: int, duration: int) -> int:
    """
    Index of the latest clip whose start is at or before the overlay's midpoint.

    A midpoint exactly on a boundary belongs to the later clip; a midpoint
    before every clip belongs to the base clip.
    """
    mid = from_frame + duration / 2
    for i in range(len(ranges) - 1, -1, -1):
        if mid >= ranges[i].from_frame:
            return i
    return 0


class _Extractor:
    def __init__(self, existing: Optional[OverlayConfig], fps: int):
        self.existing = existing
        self.fps = fps

    def scoped(self, clip: int) -> Optional[OverlayConfig]:
        """The previous config for one clip: top-level for the base, nested otherwise."""
        if clip == 0:
            return self.existing
        appended = self.existing.appended_clips if self.existing else None
        if appended and clip - 1 < len(appended):
            return appended[clip - 1].overlay_config
        return None

    def seconds(self, frames: int) -> float:
        return frames_to_seconds(frames, self.fps)

    def hook(self, text: TimelineOverlay, clip_from: int, prev: Optional[OverlayConfig]) -> HookOverlay:
        lines = text.content.split("\n")
        prev_hook = prev.hook if prev else None
        return HookOverlay(
            line1=lines[0],
            line2=lines[1] if len(lines) > 1 else None,
            line2_color=prev_hook.line2_color if prev_hook else None,
            start_sec=self.seconds(text.from_ - clip_from),
            end_sec=self.seconds(text.end - clip_from),
            # The timeline has no notion of entrance animation
            animation=prev_hook.animation if prev_hook else "pop",
            font_size=_unless_filled_in(
                _parse_int(text.styles.get("fontSize"), 52), 52, prev_hook, "font_size"
            ),
            font_weight=_unless_filled_in(
                _parse_int(text.styles.get("fontWeight"), 800), 800, prev_hook, "font_weight"
            ),
            position=_unless_filled_in(nearest_position(text.top), "top", prev_hook, "position"),
        )

    def cta(self, text: TimelineOverlay, clip_from: int, prev: Optional[OverlayConfig]) -> CTAOverlay:
        prev_cta = prev.cta if prev else None
        color = _str_or_none(text.styles.get("backgroundColor"))
        if color == "transparent":
            color = None
        # Forward paints a missing button colour with the brand colour
        brand = (prev.brand_color if prev else None) or DEFAULT_BRAND_COLOR
        return CTAOverlay(
            button_text=text.content,
            brand_name=prev_cta.brand_name if prev_cta else None,
            url=prev_cta.url if prev_cta else None,
            button_color=_unless_filled_in(color, brand, prev_cta, "button_color"),
            start_sec=self.seconds(text.from_ - clip_from),
            animation=prev_cta.animation if prev_cta else "pop",
            font_size=_unless_filled_in(
                _parse_int(text.styles.get("fontSize"), 32), 32, prev_cta, "font_size"
            ),
        )

    def end_card(
        self, bg: TimelineOverlay, text: Optional[TimelineOverlay]
    ) -> EndCardOverlay:
        prev_card = self.existing.end_card if self.existing else None
        text_styles = text.styles if text else {}
        return EndCardOverlay(
            duration_sec=self.seconds(bg.duration_in_frames),
            background_color=_str_or_none(bg.styles.get("fill")) or "#000000",
            text=text.content if text else None,
            text_color=_unless_filled_in(
                _str_or_none(text_styles.get("color")), "#FFFFFF", prev_card, "text_color"
            ) if text else None,
            font_size=_unless_filled_in(
                _parse_int(text_styles.get("fontSize"), 48), 48, prev_card, "font_size"
            ) if text else None,
        )

    def captions(self, cap: TimelineOverlay, clip_from: int) -> List[CaptionOverlay]:
        cues = cap.captions or []
        styles = cap.styles or {}
        container_start = self.seconds(cap.from_ - clip_from)
        font_size = _parse_int(styles.get("fontSize", "36"), 36)
        font_weight = _parse_int(styles.get("fontWeight"), 600)
        position = nearest_position(cap.top)

        meta = styles.get(tags.CUES_KEY)
        if not isinstance(meta, list) or len(meta) != len(cues):
            # Cues were added or removed in the editor; infer instead
            meta = None

        result = []
        for i, cue in enumerate(cues):
            if meta is not None and isinstance(meta[i], dict):
                highlight = meta[i].get("highlight")
                if not isinstance(highlight, bool):
                    highlight = None
                highlight_word = _str_or_none(meta[i].get("highlightWord"))
            else:
                highlight = bool(styles.get("highlightStyle"))
                highlight_word = cue.words[0].word if cue.words else None
            result.append(
                CaptionOverlay(
                    text=cue.text,
                    start_sec=container_start + cue.start_ms / 1000,
                    end_sec=container_start + cue.end_ms / 1000,
                    highlight=highlight,
                    highlight_word=highlight_word,
                    font_size=font_size,
                    font_weight=font_weight,
                    position=position,
                )
            )
        return result

    def graphic(self, img: TimelineOverlay) -> GraphicOverlay:
        opacity = (img.styles or {}).get("opacity")
        if isinstance(opacity, bool) or not isinstance(opacity, (int, float)):
            opacity = None
        return GraphicOverlay(
            # Not recoverable from an image entry
            type="logo",
            image_url=img.src or None,
            text=img.content or None,
            position=nearest_graphic_position(img.left, img.top),
            start_sec=self.seconds(img.from_),
            end_sec=self.seconds(img.end),
            opacity=opacity if opacity is not None else 1,
        )


def timeline_to_config(
    overlays: Sequence[TimelineOverlay],
    existing_config: Optional[OverlayConfig] = None,
    fps: int = 30,
) -> OverlayConfig:
    """
    Rebuild a declarative config from an edited timeline.

    `existing_config` is the config the timeline was opened from; it supplies
    fields the timeline has no representation for (style, brand colours,
    animations) and anything that no longer has a timeline entry.
    """
    extract = _Extractor(existing_config, fps)
    ranges = clip_ranges(overlays)
    per_clip = [_ClipOverlays() for _ in ranges]
    if not ranges:
        logger.debug("Timeline has no video entries; skipping clip-owned overlays")

    graphics: List[GraphicOverlay] = []
    voiceover_url: Optional[str] = None
    end_card_bg: Optional[TimelineOverlay] = None
    end_card_text: Optional[TimelineOverlay] = None

    for o in overlays:
        styles = o.styles or {}
        tag = tags.tag_of(styles)

        if o.type == OverlayType.video:
            continue

        # End cards trail every clip by construction and are never clip-owned
        if o.type == OverlayType.shape:
            if tag == tags.TAG_ENDCARD_BG:
                end_card_bg = o
            continue
        if o.type == OverlayType.text and tag == tags.TAG_ENDCARD_TEXT:
            end_card_text = o
            continue

        if o.type == OverlayType.image:
            graphics.append(extract.graphic(o))
            continue
        if o.type == OverlayType.sound:
            if voiceover_url is None and o.src:
                voiceover_url = o.src
            continue

        if not ranges:
            continue

        ci = clip_index(ranges, o.from_, o.duration_in_frames)
        # Base-clip fields are stored in absolute time
        clip_from = 0 if ci == 0 else ranges[ci].from_frame
        prev = extract.scoped(ci)
        bucket = per_clip[ci]

        if o.type == OverlayType.text:
            if tag == tags.TAG_CTA:
                bucket.cta = extract.cta(o, clip_from, prev)
            elif bucket.hook is None:
                if tag != tags.TAG_HOOK:
                    logger.debug(f"Untagged text overlay {o.id} read as clip {ci} hook")
                bucket.hook = extract.hook(o, clip_from, prev)
        elif o.type == OverlayType.caption:
            bucket.captions.extend(extract.captions(o, clip_from))

    appended_clips: List[AppendedClip] = []
    for i in range(1, len(ranges)):
        clip = per_clip[i]
        nested = None
        if clip.hook or clip.captions or clip.cta:
            prev = extract.scoped(i)
            nested = OverlayConfig(
                style=(prev.style if prev else None)
                or (existing_config.style if existing_config else None)
                or "clean",
                hook=clip.hook,
                captions=clip.captions or None,
                cta=clip.cta,
            )
        appended_clips.append(
            AppendedClip(
                video_url=ranges[i].src,
                duration_seconds=extract.seconds(ranges[i].end - ranges[i].from_frame),
                from_frame=ranges[i].from_frame,
                overlay_config=nested,
            )
        )

    end_card = None
    if end_card_bg is not None:
        end_card = extract.end_card(end_card_bg, end_card_text)

    base = per_clip[0] if per_clip else _ClipOverlays()
    prev = existing_config or OverlayConfig()
    return OverlayConfig(
        hook=base.hook or prev.hook,
        captions=base.captions or prev.captions,
        cta=base.cta or prev.cta,
        graphics=graphics or prev.graphics,
        end_card=end_card or prev.end_card,
        style=prev.style or "clean",
        brand_color=prev.brand_color,
        accent_color=prev.accent_color,
        voiceover_url=voiceover_url or prev.voiceover_url,
        appended_clips=appended_clips or prev.appended_clips,
        video_clips=prev.video_clips,
    )
