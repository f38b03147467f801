from fastapi import APIRouter
from timeline_bridge.api.v1.routes_timeline import router as timeline_router
from timeline_bridge.api.v1.routes_compositions import router as compositions_router

api_router = APIRouter()
api_router.include_router(timeline_router, prefix="", tags=["timeline"])
api_router.include_router(compositions_router, prefix="", tags=["compositions"])
