import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Float, JSON
from sqlalchemy.dialects.postgresql import JSONB
from timeline_bridge.core.db import Base

# JSONB on Postgres, plain JSON on anything else (SQLite in tests)
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class VideoComposition(Base):
    __tablename__ = "video_compositions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    canvas_id = Column(String, nullable=False, index=True)
    source_job_ids = Column(JSONDocument, nullable=False)  # list of job ids, base clip first

    # Base clip the declarative config is anchored to
    video_url = Column(String, nullable=False)
    duration_seconds = Column(Float, nullable=True)

    overlay_config = Column(JSONDocument, nullable=False)  # camelCase OverlayConfig JSON

    title = Column(String, nullable=True)
    thumbnail_url = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )
