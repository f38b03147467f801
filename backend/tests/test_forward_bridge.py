import pytest

from timeline_bridge.schemas.overlay_config import (
    AppendedClip,
    CaptionOverlay,
    CTAOverlay,
    EndCardOverlay,
    GraphicOverlay,
    HookOverlay,
    OverlayConfig,
)
from timeline_bridge.schemas.timeline import OverlayType
from timeline_bridge.services import tags
from timeline_bridge.services.forward_bridge import config_to_timeline
from timeline_bridge.services.timing import IdAllocator

VIDEO_URL = "https://cdn.example.com/base.mp4"


def _of_type(overlays, overlay_type):
    return [o for o in overlays if o.type == overlay_type]


def _tagged(overlays, tag):
    return [o for o in overlays if o.styles.get(tags.TAG_KEY) == tag]


@pytest.fixture
def full_config():
    return OverlayConfig(
        brand_color="#ff0055",
        hook=HookOverlay(line1="Stop scrolling", line2="Look at this", start_sec=0, end_sec=3),
        captions=[CaptionOverlay(text="One two three", start_sec=3.0, end_sec=4.5)],
        cta=CTAOverlay(button_text="Buy", start_sec=6),
        graphics=[GraphicOverlay(type="badge", position="top_right", start_sec=1, end_sec=4, opacity=0.8)],
        voiceover_url="https://cdn.example.com/vo.mp3",
        end_card=EndCardOverlay(duration_sec=2, background_color="#111111", text="Shop"),
    )


class TestRows:
    def test_every_category_gets_its_own_row(self, full_config):
        overlays = config_to_timeline(full_config, VIDEO_URL, 8)
        rows = {
            "hook": _tagged(overlays, tags.TAG_HOOK)[0].row,
            "captions": _of_type(overlays, OverlayType.caption)[0].row,
            "cta": _tagged(overlays, tags.TAG_CTA)[0].row,
            "graphics": _of_type(overlays, OverlayType.image)[0].row,
            "voiceover": _of_type(overlays, OverlayType.sound)[0].row,
            "video": _of_type(overlays, OverlayType.video)[0].row,
            "end_card": _tagged(overlays, tags.TAG_ENDCARD_BG)[0].row,
        }
        assert rows == {
            "hook": 0,
            "captions": 1,
            "cta": 2,
            "graphics": 3,
            "voiceover": 4,
            "video": 5,
            "end_card": 6,
        }
        assert _tagged(overlays, tags.TAG_ENDCARD_TEXT)[0].row == 0

    def test_absent_categories_take_no_row(self):
        config = OverlayConfig(cta=CTAOverlay(button_text="Buy", start_sec=1))
        overlays = config_to_timeline(config, VIDEO_URL, 8)
        assert _tagged(overlays, tags.TAG_CTA)[0].row == 0
        assert _of_type(overlays, OverlayType.video)[0].row == 1

    def test_empty_config_is_just_the_video(self):
        overlays = config_to_timeline(OverlayConfig(), VIDEO_URL, 8)
        assert len(overlays) == 1
        video = overlays[0]
        assert video.type == OverlayType.video
        assert (video.from_, video.duration_in_frames, video.row) == (0, 240, 0)
        assert video.src == VIDEO_URL
        assert (video.width, video.height) == (1080, 1920)


def test_hook_entry(full_config):
    hook = _tagged(config_to_timeline(full_config, VIDEO_URL, 8), tags.TAG_HOOK)[0]
    assert hook.type == OverlayType.text
    assert hook.content == "Stop scrolling\nLook at this"
    assert (hook.from_, hook.duration_in_frames) == (0, 90)
    assert (hook.left, hook.top, hook.width, hook.height) == (0, 80, 1080, 300)
    assert hook.styles["fontSize"] == "52px"
    assert hook.styles["fontWeight"] == "800"


class TestCaptions:
    def test_cues_aggregate_into_one_entry(self):
        config = OverlayConfig(
            captions=[
                CaptionOverlay(text="first", start_sec=10.0, end_sec=11.0),
                CaptionOverlay(text="second", start_sec=12.0, end_sec=13.5, position="center"),
            ]
        )
        overlays = config_to_timeline(config, VIDEO_URL, 15)
        entries = _of_type(overlays, OverlayType.caption)
        assert len(entries) == 1
        entry = entries[0]
        assert (entry.from_, entry.duration_in_frames) == (300, 105)
        # Geometry follows the first cue
        assert entry.top == 1520
        assert [(c.start_ms, c.end_ms) for c in entry.captions] == [(0, 1000), (2000, 3500)]
        assert entry.captions[1].timestamp_ms == 2000

    def test_words_split_cue_evenly(self, full_config):
        entry = _of_type(config_to_timeline(full_config, VIDEO_URL, 8), OverlayType.caption)[0]
        words = entry.captions[0].words
        assert [w.word for w in words] == ["One", "two", "three"]
        assert [(w.start_ms, w.end_ms) for w in words] == [(0, 500), (500, 1000), (1000, 1500)]

    def test_highlight_uses_brand_colour(self, full_config):
        entry = _of_type(config_to_timeline(full_config, VIDEO_URL, 8), OverlayType.caption)[0]
        assert entry.styles["highlightStyle"]["backgroundColor"] == "#ff0055"
        assert entry.styles[tags.CUES_KEY] == [{"highlight": None, "highlightWord": None}]


def test_cta_runs_to_end_of_video(full_config):
    cta = _tagged(config_to_timeline(full_config, VIDEO_URL, 8), tags.TAG_CTA)[0]
    assert (cta.from_, cta.duration_in_frames) == (180, 60)
    assert cta.styles["backgroundColor"] == "#ff0055"
    assert (cta.left, cta.width) == (200, 680)


def test_graphic_entry(full_config):
    image = _of_type(config_to_timeline(full_config, VIDEO_URL, 8), OverlayType.image)[0]
    assert (image.left, image.top, image.width, image.height) == (880, 40, 160, 160)
    assert (image.from_, image.duration_in_frames) == (30, 90)
    assert image.styles["opacity"] == 0.8


def test_voiceover_mutes_every_clip(full_config):
    full_config.appended_clips = [
        AppendedClip(video_url="https://cdn.example.com/2.mp4", duration_seconds=4, from_frame=240)
    ]
    overlays = config_to_timeline(full_config, VIDEO_URL, 8)
    sound = _of_type(overlays, OverlayType.sound)[0]
    assert (sound.from_, sound.duration_in_frames) == (0, 240)
    assert all(v.styles["volume"] == 0 for v in _of_type(overlays, OverlayType.video))


class TestClamping:
    def test_overlay_past_the_end_is_dropped(self):
        config = OverlayConfig(
            hook=HookOverlay(line1="late", start_sec=10, end_sec=12),
            graphics=[GraphicOverlay(start_sec=9, end_sec=10)],
            cta=CTAOverlay(button_text="Buy", start_sec=8),
        )
        overlays = config_to_timeline(config, VIDEO_URL, 8)
        assert [o.type for o in overlays] == [OverlayType.video]

    def test_overlay_crossing_the_end_is_trimmed(self):
        config = OverlayConfig(hook=HookOverlay(line1="edge", start_sec=7, end_sec=10))
        hook = _tagged(config_to_timeline(config, VIDEO_URL, 8), tags.TAG_HOOK)[0]
        assert (hook.from_, hook.duration_in_frames) == (210, 30)


class TestAppendedClips:
    def _config(self):
        return OverlayConfig(
            appended_clips=[
                AppendedClip(
                    video_url="https://cdn.example.com/2.mp4",
                    duration_seconds=7,
                    from_frame=240,
                    overlay_config=OverlayConfig(
                        hook=HookOverlay(line1="Part two", start_sec=0, end_sec=2),
                        cta=CTAOverlay(button_text="Learn", start_sec=2),
                    ),
                )
            ]
        )

    def test_nested_overlays_are_rebased(self):
        overlays = config_to_timeline(self._config(), VIDEO_URL, 8)
        videos = _of_type(overlays, OverlayType.video)
        assert [(v.from_, v.duration_in_frames) for v in videos] == [(0, 240), (240, 210)]

        hook = _tagged(overlays, tags.TAG_HOOK)[0]
        cta = _tagged(overlays, tags.TAG_CTA)[0]
        assert (hook.from_, hook.duration_in_frames) == (240, 60)
        # Clamped to the clip's own 210 frames, then shifted
        assert (cta.from_, cta.duration_in_frames) == (300, 150)

    def test_clip_config_cannot_place_timeline_wide_entries(self):
        config = OverlayConfig(
            appended_clips=[
                AppendedClip(
                    video_url="https://cdn.example.com/2.mp4",
                    duration_seconds=4,
                    from_frame=240,
                    overlay_config=OverlayConfig(
                        cta=CTAOverlay(button_text="Learn", start_sec=1),
                        end_card=EndCardOverlay(duration_sec=1, background_color="#111111", text="Bye"),
                        voiceover_url="https://cdn.example.com/vo-2.mp3",
                        graphics=[GraphicOverlay(start_sec=0, end_sec=2)],
                    ),
                ),
                AppendedClip(video_url="https://cdn.example.com/3.mp4", duration_seconds=4, from_frame=360),
            ],
            end_card=EndCardOverlay(duration_sec=2, background_color="#000000"),
        )
        overlays = config_to_timeline(config, VIDEO_URL, 8)

        clip_ends = [v.end for v in _of_type(overlays, OverlayType.video)]
        (bg,) = _tagged(overlays, tags.TAG_ENDCARD_BG)
        assert bg.from_ >= max(clip_ends) == 480
        assert _tagged(overlays, tags.TAG_ENDCARD_TEXT) == []
        assert _of_type(overlays, OverlayType.sound) == []
        assert _of_type(overlays, OverlayType.image) == []
        assert [v.styles["volume"] for v in _of_type(overlays, OverlayType.video)] == [1, 1, 1]
        assert _tagged(overlays, tags.TAG_CTA)[0].from_ == 270

    def test_ids_are_unique(self):
        config = self._config()
        config.end_card = EndCardOverlay(duration_sec=1, background_color="#000", text="Bye")
        overlays = config_to_timeline(config, VIDEO_URL, 8)
        ids = [o.id for o in overlays]
        assert len(ids) == len(set(ids))
        assert min(ids) >= IdAllocator.DEFAULT_START

    def test_ids_are_scoped_per_call(self):
        first = config_to_timeline(self._config(), VIDEO_URL, 8)
        second = config_to_timeline(self._config(), VIDEO_URL, 8)
        assert [o.id for o in first] == [o.id for o in second]

    def test_injected_allocator_continues_numbering(self):
        overlays = config_to_timeline(OverlayConfig(), VIDEO_URL, 8, ids=IdAllocator(42))
        assert overlays[0].id == 42


class TestEndCard:
    def test_starts_after_base_video(self, full_config):
        overlays = config_to_timeline(full_config, VIDEO_URL, 8)
        bg = _tagged(overlays, tags.TAG_ENDCARD_BG)[0]
        text = _tagged(overlays, tags.TAG_ENDCARD_TEXT)[0]
        assert bg.type == OverlayType.shape
        assert (bg.from_, bg.duration_in_frames) == (240, 60)
        assert bg.styles["fill"] == "#111111"
        assert (text.from_, text.content, text.top) == (240, "Shop", 760)

    def test_without_text_only_background(self):
        config = OverlayConfig(end_card=EndCardOverlay(duration_sec=2, background_color="#000000"))
        overlays = config_to_timeline(config, VIDEO_URL, 8)
        assert len(_tagged(overlays, tags.TAG_ENDCARD_BG)) == 1
        assert _tagged(overlays, tags.TAG_ENDCARD_TEXT) == []

    @pytest.mark.parametrize(
        "clips",
        [
            [(240, 7.0)],
            [(240, 7.0), (300, 2.0)],          # second clip overlaps and ends early
            [(500, 1.0), (240, 3.0)],          # gap, out of order
            [(100, 1.0)],                      # ends inside the base video
        ],
    )
    def test_trails_every_clip(self, clips):
        config = OverlayConfig(
            end_card=EndCardOverlay(duration_sec=2, background_color="#000000"),
            appended_clips=[
                AppendedClip(video_url=f"https://cdn.example.com/{i}.mp4", duration_seconds=d, from_frame=f)
                for i, (f, d) in enumerate(clips)
            ],
        )
        overlays = config_to_timeline(config, VIDEO_URL, 8)
        bg = _tagged(overlays, tags.TAG_ENDCARD_BG)[0]
        for video in _of_type(overlays, OverlayType.video):
            assert bg.from_ >= video.from_ + video.duration_in_frames
        assert bg.from_ == max(v.from_ + v.duration_in_frames for v in _of_type(overlays, OverlayType.video))
