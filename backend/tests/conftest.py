"""
Shared fixtures. The app is pointed at SQLite before it is imported so no
Postgres server is needed.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timeline_bridge.core.db import Base, get_db
from timeline_bridge.main import app
from timeline_bridge.schemas.overlay_config import (
    AppendedClip,
    CaptionOverlay,
    CTAOverlay,
    EndCardOverlay,
    HookOverlay,
    OverlayConfig,
)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def build_scenario_config(fps: int = 30) -> OverlayConfig:
    """
    8s base video with hook, three captions, a CTA, one appended 7s clip that
    carries its own CTA, and a 2s end card.
    """
    return OverlayConfig(
        style="bold",
        brand_color="#ff0055",
        hook=HookOverlay(
            line1="Hello",
            start_sec=0.0,
            end_sec=3.0,
            animation="pop",
            font_size=52,
            font_weight=800,
            position="top",
        ),
        captions=[
            CaptionOverlay(
                text="Meet the bottle",
                start_sec=3.0,
                end_sec=4.0,
                highlight=True,
                highlight_word="bottle",
                font_size=36,
                font_weight=600,
                position="bottom",
            ),
            CaptionOverlay(
                text="Cold for 24 hours",
                start_sec=4.5,
                end_sec=5.5,
                font_size=36,
                font_weight=600,
                position="bottom",
            ),
            CaptionOverlay(
                text="Grab yours",
                start_sec=6.0,
                end_sec=7.0,
                font_size=36,
                font_weight=600,
                position="bottom",
            ),
        ],
        cta=CTAOverlay(
            button_text="Shop Now",
            start_sec=6.0,
            animation="slide",
            button_color="#00aa55",
            font_size=32,
        ),
        appended_clips=[
            AppendedClip(
                video_url="https://cdn.example.com/clip-2.mp4",
                duration_seconds=7.0,
                from_frame=8 * fps,
                overlay_config=OverlayConfig(
                    style="bold",
                    cta=CTAOverlay(button_text="Learn More", start_sec=2.0, animation="fade"),
                ),
            )
        ],
        end_card=EndCardOverlay(duration_sec=2.0, background_color="#000000", text="Shop Now"),
    )


@pytest.fixture
def scenario_config():
    return build_scenario_config()
