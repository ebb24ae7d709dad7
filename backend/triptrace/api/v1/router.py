"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from triptrace.api.v1.routes import geometry, traces

api_router = APIRouter()

api_router.include_router(geometry.router, tags=["Geometry"])
api_router.include_router(traces.router, prefix="/traces", tags=["Traces"])
