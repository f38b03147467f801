"""
Declarative OverlayConfig -> flat editor timeline.

Every declared element becomes one positioned, timed TimelineOverlay. Rows are
handed out only to categories that are present, appended clips are expanded by
calling this same converter on their nested config and rebasing the result, and
the end card is scheduled after the last frame of the longest-running clip.
"""
from itertools import count
from typing import List, Optional

from loguru import logger

from timeline_bridge.schemas.overlay_config import OverlayConfig
from timeline_bridge.schemas.timeline import Caption, CaptionWord, OverlayType, TimelineOverlay
from timeline_bridge.services import tags
from timeline_bridge.services.positions import (
    CTA_BOX,
    END_CARD_TEXT_BOX,
    FULL_CANVAS,
    graphic_box,
    position_box,
)
from timeline_bridge.services.timing import IdAllocator, clamp_timing, frames_to_seconds, seconds_to_frames

DEFAULT_BRAND_COLOR = "#3b82f6"
FONT_FAMILY = "Outfit"

# End-card text is drawn on the foreground row
END_CARD_TEXT_ROW = 0


def _text_styles(font_size: int, font_weight, color: str, background: str, **extra) -> dict:
    styles = {
        "fontSize": f"{font_size}px",
        "fontWeight": str(font_weight),
        "color": color,
        "backgroundColor": background,
        "fontFamily": FONT_FAMILY,
        "fontStyle": "normal",
        "textDecoration": "none",
        "textAlign": "center",
    }
    styles.update(extra)
    return styles


def clip_scoped(config: OverlayConfig) -> OverlayConfig:
    """
    An appended clip's config carries only what belongs to the clip: hook,
    captions and CTA. End cards, voiceovers, graphics and further clips are
    timeline-wide and only honoured at the top level.
    """
    return config.model_copy(
        update={"end_card": None, "voiceover_url": None, "graphics": None, "appended_clips": None}
    )


def _caption_cues(config: OverlayConfig, entry_start: float) -> List[Caption]:
    # Offsets are relative to the entry's frame-aligned start
    cues: List[Caption] = []
    for c in config.captions:
        rel_start_ms = (c.start_sec - entry_start) * 1000
        rel_end_ms = (c.end_sec - entry_start) * 1000

        # No word timing upstream: split the cue evenly across its words
        words = c.text.split()
        seg = (rel_end_ms - rel_start_ms) / len(words) if words else 0
        cues.append(
            Caption(
                text=c.text,
                start_ms=rel_start_ms,
                end_ms=rel_end_ms,
                timestamp_ms=rel_start_ms,
                confidence=1,
                words=[
                    CaptionWord(
                        word=word,
                        start_ms=rel_start_ms + i * seg,
                        end_ms=rel_start_ms + (i + 1) * seg,
                        confidence=1,
                    )
                    for i, word in enumerate(words)
                ],
            )
        )
    return cues


def config_to_timeline(
    config: OverlayConfig,
    video_url: str,
    duration_sec: float,
    fps: int = 30,
    ids: Optional[IdAllocator] = None,
) -> List[TimelineOverlay]:
    """
    Expand `config` into timeline overlays for a base video of `duration_sec`.

    `ids` lets the caller continue an existing id sequence; by default ids are
    numbered from IdAllocator.DEFAULT_START for this call only.
    """
    ids = ids or IdAllocator()
    overlays: List[TimelineOverlay] = []
    total_frames = seconds_to_frames(duration_sec, fps)

    # Only allocate rows for categories that exist so the editor shows no empty tracks
    rows = count()
    hook_row = next(rows) if config.hook else -1
    caption_row = next(rows) if config.captions else -1
    cta_row = next(rows) if config.cta else -1
    graphics_row = next(rows) if config.graphics else -1
    voiceover_row = next(rows) if config.voiceover_url else -1
    video_row = next(rows)
    end_card_bg_row = next(rows) if config.end_card else -1

    has_voiceover = bool(config.voiceover_url)

    # 1. Hook
    if config.hook:
        h = config.hook
        box = position_box(h.position, "top")
        content = f"{h.line1}\n{h.line2}" if h.line2 else h.line1
        timing = clamp_timing(
            seconds_to_frames(h.start_sec, fps),
            seconds_to_frames(h.end_sec - h.start_sec, fps),
            total_frames,
        )
        if timing:
            overlays.append(
                TimelineOverlay(
                    id=ids(),
                    type=OverlayType.text,
                    content=content,
                    from_=timing.from_frame,
                    duration_in_frames=timing.duration_in_frames,
                    left=box.left,
                    top=box.top,
                    width=box.width,
                    height=box.height,
                    row=hook_row,
                    styles=_text_styles(
                        h.font_size or 52,
                        h.font_weight or 800,
                        "#FFFFFF",
                        "transparent",
                        textShadow="2px 2px 8px rgba(0,0,0,0.7)",
                        **{tags.TAG_KEY: tags.TAG_HOOK},
                    ),
                )
            )
        else:
            logger.debug(f"Hook at {h.start_sec}s falls outside {duration_sec}s video, dropped")

    # 2. Captions, aggregated into one entry
    if config.captions:
        captions = config.captions
        first_start = min(c.start_sec for c in captions)
        last_end = max(c.end_sec for c in captions)
        lead = captions[0]
        box = position_box(lead.position, "bottom")
        timing = clamp_timing(
            seconds_to_frames(first_start, fps),
            seconds_to_frames(last_end - first_start, fps),
            total_frames,
        )
        if timing:
            overlays.append(
                TimelineOverlay(
                    id=ids(),
                    type=OverlayType.caption,
                    captions=_caption_cues(config, frames_to_seconds(timing.from_frame, fps)),
                    from_=timing.from_frame,
                    duration_in_frames=timing.duration_in_frames,
                    left=box.left,
                    top=box.top,
                    width=box.width,
                    height=box.height,
                    row=caption_row,
                    styles={
                        "fontFamily": FONT_FAMILY,
                        "fontSize": f"{lead.font_size or 36}px",
                        "lineHeight": 1.3,
                        "textAlign": "center",
                        "color": "#FFFFFF",
                        "fontWeight": lead.font_weight or 600,
                        "textShadow": "1px 1px 4px rgba(0,0,0,0.5)",
                        "highlightStyle": {
                            "backgroundColor": config.brand_color or DEFAULT_BRAND_COLOR,
                            "color": "#FFFFFF",
                            "scale": 1.1,
                            "fontWeight": 800,
                            "padding": "4px 8px",
                            "borderRadius": "4px",
                        },
                        tags.CUES_KEY: [
                            {"highlight": c.highlight, "highlightWord": c.highlight_word}
                            for c in captions
                        ],
                    },
                    template="default",
                )
            )
        else:
            logger.debug(f"Captions starting at {first_start}s fall outside {duration_sec}s video, dropped")

    # 3. CTA, runs to the end of the video
    if config.cta:
        c = config.cta
        start_frame = seconds_to_frames(c.start_sec, fps)
        timing = clamp_timing(start_frame, total_frames - start_frame, total_frames)
        if timing:
            overlays.append(
                TimelineOverlay(
                    id=ids(),
                    type=OverlayType.text,
                    content=c.button_text,
                    from_=timing.from_frame,
                    duration_in_frames=timing.duration_in_frames,
                    left=CTA_BOX.left,
                    top=CTA_BOX.top,
                    width=CTA_BOX.width,
                    height=CTA_BOX.height,
                    row=cta_row,
                    styles=_text_styles(
                        c.font_size or 32,
                        700,
                        "#FFFFFF",
                        c.button_color or config.brand_color or DEFAULT_BRAND_COLOR,
                        padding="16px 32px",
                        borderRadius="16px",
                        **{tags.TAG_KEY: tags.TAG_CTA},
                    ),
                )
            )
        else:
            logger.debug(f"CTA at {c.start_sec}s falls outside {duration_sec}s video, dropped")

    # 4. Graphics
    for g in config.graphics or []:
        box = graphic_box(g.position)
        timing = clamp_timing(
            seconds_to_frames(g.start_sec, fps),
            seconds_to_frames(g.end_sec - g.start_sec, fps),
            total_frames,
        )
        if not timing:
            logger.debug(f"Graphic at {g.start_sec}s falls outside {duration_sec}s video, dropped")
            continue
        overlays.append(
            TimelineOverlay(
                id=ids(),
                type=OverlayType.image,
                src=g.image_url or "",
                content=g.text or "",
                from_=timing.from_frame,
                duration_in_frames=timing.duration_in_frames,
                left=box.left,
                top=box.top,
                width=box.width,
                height=box.height,
                row=graphics_row,
                styles={
                    "opacity": g.opacity if g.opacity is not None else 1,
                    "objectFit": "contain",
                },
            )
        )

    # 5. Voiceover spans the whole base video
    if config.voiceover_url:
        overlays.append(
            TimelineOverlay(
                id=ids(),
                type=OverlayType.sound,
                content="Voiceover",
                src=config.voiceover_url,
                from_=0,
                duration_in_frames=total_frames,
                row=voiceover_row,
                styles={"volume": 1},
            )
        )

    # 6. Base clip, muted under a voiceover
    overlays.append(video_entry(ids(), video_url, 0, total_frames, video_row, has_voiceover))

    # 7. Appended clips with their own time-shifted overlays
    for clip in config.appended_clips or []:
        clip_frames = seconds_to_frames(clip.duration_seconds, fps)
        overlays.append(
            video_entry(ids(), clip.video_url, clip.from_frame, clip_frames, video_row, has_voiceover)
        )
        if clip.overlay_config:
            nested = config_to_timeline(
                clip_scoped(clip.overlay_config), clip.video_url, clip.duration_seconds, fps, ids
            )
            for sub in nested:
                # The clip itself was placed above
                if sub.type == OverlayType.video:
                    continue
                overlays.append(
                    sub.model_copy(update={"from_": sub.from_ + clip.from_frame, "id": ids()})
                )

    # 8. End card trails every clip, not just the base video
    if config.end_card:
        ec = config.end_card
        ec_frames = seconds_to_frames(ec.duration_sec, fps)
        all_clips_end = max(
            [total_frames]
            + [
                clip.from_frame + seconds_to_frames(clip.duration_seconds, fps)
                for clip in config.appended_clips or []
            ]
        )

        overlays.append(
            TimelineOverlay(
                id=ids(),
                type=OverlayType.shape,
                content="End Card",
                from_=all_clips_end,
                duration_in_frames=ec_frames,
                left=FULL_CANVAS.left,
                top=FULL_CANVAS.top,
                width=FULL_CANVAS.width,
                height=FULL_CANVAS.height,
                row=end_card_bg_row,
                styles={"fill": ec.background_color, tags.TAG_KEY: tags.TAG_ENDCARD_BG},
            )
        )

        if ec.text:
            overlays.append(
                TimelineOverlay(
                    id=ids(),
                    type=OverlayType.text,
                    content=ec.text,
                    from_=all_clips_end,
                    duration_in_frames=ec_frames,
                    left=END_CARD_TEXT_BOX.left,
                    top=END_CARD_TEXT_BOX.top,
                    width=END_CARD_TEXT_BOX.width,
                    height=END_CARD_TEXT_BOX.height,
                    row=END_CARD_TEXT_ROW,
                    styles=_text_styles(
                        ec.font_size or 48,
                        700,
                        ec.text_color or "#FFFFFF",
                        "transparent",
                        **{tags.TAG_KEY: tags.TAG_ENDCARD_TEXT},
                    ),
                )
            )

    return overlays


def video_entry(
    overlay_id: int, video_url: str, from_frame: int, frames: int, row: int, muted: bool
) -> TimelineOverlay:
    return TimelineOverlay(
        id=overlay_id,
        type=OverlayType.video,
        content=video_url,
        src=video_url,
        from_=from_frame,
        duration_in_frames=frames,
        left=FULL_CANVAS.left,
        top=FULL_CANVAS.top,
        width=FULL_CANVAS.width,
        height=FULL_CANVAS.height,
        row=row,
        styles={"objectFit": "cover", "volume": 0 if muted else 1},
    )
