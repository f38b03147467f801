from sqlalchemy.orm import Session

from timeline_bridge.models.composition import VideoComposition
from timeline_bridge.schemas.composition import CompositionCreate, CompositionUpdate
from timeline_bridge.schemas.overlay_config import OverlayConfig


def create_composition(db: Session, data: CompositionCreate) -> VideoComposition:
    composition = VideoComposition(
        canvas_id=data.canvas_id,
        source_job_ids=list(data.source_job_ids),
        video_url=data.video_url,
        duration_seconds=data.duration_seconds,
        overlay_config=data.overlay_config.to_json(),
        title=data.title,
        thumbnail_url=data.thumbnail_url,
    )
    db.add(composition)
    db.commit()
    db.refresh(composition)
    return composition


def get_composition(db: Session, composition_id: str) -> VideoComposition | None:
    return db.query(VideoComposition).filter(VideoComposition.id == composition_id).first()


def list_compositions(db: Session, canvas_id: str) -> list[VideoComposition]:
    return (
        db.query(VideoComposition)
        .filter(VideoComposition.canvas_id == canvas_id)
        .order_by(VideoComposition.created_at.desc())
        .all()
    )


def update_composition(
    db: Session, composition: VideoComposition, data: CompositionUpdate
) -> VideoComposition:
    # Only fields the client actually sent
    changes = data.model_dump(exclude_unset=True)
    if "overlay_config" in changes and data.overlay_config is not None:
        changes["overlay_config"] = data.overlay_config.to_json()
    for key, value in changes.items():
        if value is not None:
            setattr(composition, key, value)
    db.commit()
    db.refresh(composition)
    return composition


def save_overlay_config(
    db: Session, composition: VideoComposition, config: OverlayConfig
) -> VideoComposition:
    composition.overlay_config = config.to_json()
    db.commit()
    db.refresh(composition)
    return composition


def delete_composition(db: Session, composition: VideoComposition) -> None:
    db.delete(composition)
    db.commit()


def stored_config(composition: VideoComposition) -> OverlayConfig:
    return OverlayConfig.model_validate(composition.overlay_config or {})
