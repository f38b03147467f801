from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger
from sqlalchemy.orm import Session
from typing import List, Optional

from timeline_bridge.core.config import get_settings
from timeline_bridge.core.db import get_db
from timeline_bridge.models.composition import VideoComposition
from timeline_bridge.schemas.bridge import ForwardResponse, ReverseResponse, TimelineSaveRequest
from timeline_bridge.schemas.composition import (
    CompositionBase,
    CompositionCreate,
    CompositionCreateResponse,
    CompositionUpdate,
)
from timeline_bridge.services.compositions import (
    create_composition,
    delete_composition,
    get_composition,
    list_compositions,
    save_overlay_config,
    stored_config,
    update_composition,
)
from timeline_bridge.services.forward_bridge import config_to_timeline
from timeline_bridge.services.reverse_bridge import timeline_to_config
from timeline_bridge.services.timing import seconds_to_frames

router = APIRouter()
settings = get_settings()


def _get_or_404(db: Session, composition_id: str) -> VideoComposition:
    composition = get_composition(db, composition_id)
    if composition is None:
        raise HTTPException(status_code=404, detail="Composition not found")
    return composition


@router.post("/compositions", response_model=CompositionCreateResponse)
def create_composition_route(body: CompositionCreate, db: Session = Depends(get_db)):
    """
    Store a new multi-clip composition.
    - `sourceJobIds`: base clip first, then appended clips
    - `overlayConfig`: the declarative overlay config
    """
    if not body.source_job_ids:
        raise HTTPException(status_code=400, detail="sourceJobIds must not be empty")

    composition = create_composition(db, body)
    logger.info(f"Created composition {composition.id} on canvas {composition.canvas_id}")
    return CompositionCreateResponse(composition_id=composition.id)


@router.get(
    "/compositions",
    response_model=List[CompositionBase],
    response_model_exclude_none=True,
)
def list_compositions_route(
    canvas_id: str = Query(..., alias="canvasId"),
    db: Session = Depends(get_db),
):
    return list_compositions(db, canvas_id)


@router.get(
    "/compositions/{composition_id}",
    response_model=CompositionBase,
    response_model_exclude_none=True,
)
def get_composition_route(composition_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, composition_id)


@router.patch(
    "/compositions/{composition_id}",
    response_model=CompositionBase,
    response_model_exclude_none=True,
)
def update_composition_route(
    composition_id: str,
    body: CompositionUpdate,
    db: Session = Depends(get_db),
):
    composition = _get_or_404(db, composition_id)
    composition = update_composition(db, composition, body)
    logger.info(f"Updated composition {composition_id}")
    return composition


@router.delete("/compositions/{composition_id}")
def delete_composition_route(composition_id: str, db: Session = Depends(get_db)):
    composition = _get_or_404(db, composition_id)
    delete_composition(db, composition)
    logger.info(f"Deleted composition {composition_id}")
    return {"success": True}


@router.get(
    "/compositions/{composition_id}/timeline",
    response_model=ForwardResponse,
    response_model_exclude_none=True,
)
def open_timeline(
    composition_id: str,
    fps: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
):
    """Open the stored config in the editor: forward conversion of the composition."""
    composition = _get_or_404(db, composition_id)
    if not composition.duration_seconds:
        raise HTTPException(status_code=400, detail="Composition has no base clip duration")

    fps = fps or settings.DEFAULT_FPS
    overlays = config_to_timeline(
        stored_config(composition),
        composition.video_url,
        composition.duration_seconds,
        fps,
    )
    return ForwardResponse(
        overlays=overlays,
        total_frames=seconds_to_frames(composition.duration_seconds, fps),
    )


@router.put(
    "/compositions/{composition_id}/timeline",
    response_model=ReverseResponse,
    response_model_exclude_none=True,
)
def save_timeline(
    composition_id: str,
    body: TimelineSaveRequest,
    db: Session = Depends(get_db),
):
    """Save an edited timeline: reverse conversion persisted as the composition's config."""
    composition = _get_or_404(db, composition_id)
    fps = body.fps or settings.DEFAULT_FPS

    config = timeline_to_config(body.overlays, stored_config(composition), fps)
    save_overlay_config(db, composition, config)
    logger.info(f"Saved timeline of composition {composition_id} ({len(body.overlays)} overlays)")
    return ReverseResponse(config=config)
