"""
Top-level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
When new domains are introduced, include their routers here.
"""

from fastapi import APIRouter

from .endpoints import tracks

router = APIRouter()

router.include_router(tracks.router, prefix="/tracks", tags=["tracks"])
