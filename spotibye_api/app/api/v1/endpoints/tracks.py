"""
Track endpoints for API v1.

These routes expose the track catalog: listing with an optional
category, search or favorites filter, retrieval, creation, partial
update, deletion and a favorite toggle.  Create and update payloads
are checked by the explicit validators in ``schemas.track`` before
they reach the service; failures are raised as
``TrackValidationError`` and rendered by the application's error
handlers, as is ``TrackNotFoundError`` from the service.
"""

import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Query, status

from spotibye_api.app.core.errors import TrackValidationError
from spotibye_api.app.schemas.track import (
    TrackCreate,
    TrackFilter,
    TrackRead,
    TrackUpdate,
    validate_track_create,
    validate_track_update,
)
from spotibye_api.app.services.track_service import TrackService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[TrackRead])
async def list_tracks(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    favorites: Optional[bool] = Query(None),
) -> List[TrackRead]:
    """List tracks.

    - **favorites=true** returns favorite tracks only.
    - **search** matches title or artist, case-insensitively.
    - **category** matches the category exactly.

    When several parameters are given only the first one in the order
    above is applied.  Without parameters every track is returned.
    """
    logger.info("GET /tracks - category: %s, search: %s, favorites: %s", category, search, favorites)
    track_filter = TrackFilter(category=category, search=search, favorites_only=bool(favorites))
    return await TrackService.list_tracks(track_filter)


@router.get("/{track_id}", response_model=TrackRead)
async def get_track(track_id: int) -> TrackRead:
    """Retrieve a single track by ID.  Returns HTTP 404 if not found."""
    return await TrackService.get_track(track_id)


@router.post("", response_model=TrackRead, status_code=status.HTTP_201_CREATED)
async def create_track(payload: Any = Body(...)) -> TrackRead:
    """Create a track.

    ``title``, ``artist``, ``category``, ``audioUrl`` and ``duration``
    are required.  Any ``isFavorite`` value is ignored; new tracks are
    never favorites.
    """
    errors = validate_track_create(payload)
    if errors:
        raise TrackValidationError(errors)
    data = TrackCreate.model_validate(payload)
    logger.info("POST /tracks - creating track: %s", data.title)
    return await TrackService.create_track(data)


@router.put("/{track_id}", response_model=TrackRead)
async def update_track(track_id: int, payload: Any = Body(...)) -> TrackRead:
    """Update a track.  Only supplied, non-null fields are changed."""
    errors = validate_track_update(payload)
    if errors:
        raise TrackValidationError(errors)
    return await TrackService.update_track(track_id, TrackUpdate.model_validate(payload))


@router.delete("/{track_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_track(track_id: int) -> None:
    """Delete a track permanently."""
    await TrackService.delete_track(track_id)
    return None


@router.patch("/{track_id}/favorite", response_model=TrackRead)
async def toggle_favorite(track_id: int) -> TrackRead:
    """Flip the favorite flag of a track."""
    return await TrackService.toggle_favorite(track_id)
