"""
Service layer for the track catalog.

``TrackService`` implements the use cases exposed by the API: listing
with filters, retrieval, creation, partial update, deletion and
favorite toggling.  Every operation runs its store calls inside one
transaction from ``core.db.transaction``; updates and toggles hold the
write lock from the initial read until commit, so concurrent writers
to the same track are serialised and the last one wins.

A missing track is reported as ``TrackNotFoundError``.  Any other
exception propagates unchanged to the API error handlers.
"""

from __future__ import annotations

import logging
from typing import List

from spotibye_api.app.core.db import transaction
from spotibye_api.app.core.errors import TrackNotFoundError
from spotibye_api.app.repositories.track_repository import TrackRecord, TrackRepository
from spotibye_api.app.schemas.track import TrackCreate, TrackFilter, TrackRead, TrackUpdate

logger = logging.getLogger(__name__)

# Fields a partial update may overwrite
UPDATABLE_FIELDS = ("title", "artist", "category", "description", "cover_image", "is_favorite")


class TrackService:
    """Service class for managing tracks."""

    @classmethod
    async def list_tracks(cls, track_filter: TrackFilter | None = None) -> List[TrackRead]:
        """Return tracks matching a single filter.

        Only one filter is applied, chosen in this order: favorites
        only, then search, then category.  Blank ``search`` and
        ``category`` values are treated as absent.  With no filter all
        tracks are returned.
        """
        track_filter = track_filter or TrackFilter()
        with transaction() as conn:
            repo = TrackRepository(conn)
            if track_filter.favorites_only:
                logger.info("Fetching favorite tracks")
                records = repo.find_by_favorite(True)
            elif track_filter.search and track_filter.search.strip():
                logger.info("Searching tracks with query: %s", track_filter.search)
                records = repo.search_by_title_or_artist(track_filter.search)
            elif track_filter.category and track_filter.category.strip():
                logger.info("Fetching tracks for category: %s", track_filter.category)
                records = repo.find_by_category(track_filter.category)
            else:
                logger.info("Fetching all tracks")
                records = repo.find_all()
        return [cls._record_to_track_read(record) for record in records]

    @classmethod
    async def get_track(cls, track_id: int) -> TrackRead:
        with transaction() as conn:
            record = TrackRepository(conn).find_by_id(track_id)
        if record is None:
            raise TrackNotFoundError(track_id)
        return cls._record_to_track_read(record)

    @classmethod
    async def create_track(cls, data: TrackCreate) -> TrackRead:
        """Insert a new track and return the stored record.

        New tracks are never favorites, whatever the caller sent.
        """
        record = TrackRecord(
            title=data.title,
            artist=data.artist,
            category=data.category,
            description=data.description,
            audio_url=data.audio_url,
            cover_image=data.cover_image,
            duration=data.duration,
            is_favorite=False,
        )
        with transaction(write=True) as conn:
            created = TrackRepository(conn).insert(record)
        logger.info("Created track %s: %s", created.id, created.title)
        return cls._record_to_track_read(created)

    @classmethod
    async def update_track(cls, track_id: int, data: TrackUpdate) -> TrackRead:
        """Apply a partial update.

        Each updatable field that is not ``None`` in ``data`` replaces
        the stored value; the rest stay as they are.  Audio URL and
        duration are never changed here.
        """
        with transaction(write=True) as conn:
            repo = TrackRepository(conn)
            record = repo.find_by_id(track_id)
            if record is None:
                raise TrackNotFoundError(track_id)
            for field in UPDATABLE_FIELDS:
                value = getattr(data, field)
                if value is not None:
                    setattr(record, field, value)
            updated = repo.save(record)
        logger.info("Updated track %s", track_id)
        return cls._record_to_track_read(updated)

    @classmethod
    async def delete_track(cls, track_id: int) -> None:
        with transaction(write=True) as conn:
            repo = TrackRepository(conn)
            if not repo.exists_by_id(track_id):
                raise TrackNotFoundError(track_id)
            repo.delete_by_id(track_id)
        logger.info("Deleted track %s", track_id)

    @classmethod
    async def toggle_favorite(cls, track_id: int) -> TrackRead:
        with transaction(write=True) as conn:
            repo = TrackRepository(conn)
            record = repo.find_by_id(track_id)
            if record is None:
                raise TrackNotFoundError(track_id)
            record.is_favorite = not record.is_favorite
            updated = repo.save(record)
        logger.info("Track %s favorite set to %s", track_id, updated.is_favorite)
        return cls._record_to_track_read(updated)

    @staticmethod
    def _record_to_track_read(record: TrackRecord) -> TrackRead:
        """Convert a store record to the public schema."""
        return TrackRead(
            id=record.id,
            title=record.title,
            artist=record.artist,
            category=record.category,
            description=record.description,
            audio_url=record.audio_url,
            cover_image=record.cover_image,
            duration=record.duration,
            is_favorite=record.is_favorite,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
