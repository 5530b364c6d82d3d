"""
Pydantic schemas and input validation for tracks.

Payload keys on the wire are camelCase (``audioUrl``, ``coverImage``,
``isFavorite``, ...) to match the web client; the models also accept
the snake_case attribute names.  Field constraints are not declared on
the models: incoming payloads are checked by ``validate_track_create``
and ``validate_track_update`` first, which return a list of
``FieldError`` pairs, and only a clean payload is turned into a model.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from ..core.errors import FieldError

TITLE_MAX_LENGTH = 200
ARTIST_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
# Largest value a SQLite INTEGER column can hold
DURATION_MAX = 2**63 - 1

_CAMEL = {
    "alias_generator": to_camel,
    "populate_by_name": True,
}


class TrackCreate(BaseModel):
    """Input for creating a track.

    There is no favorite flag here: new tracks always start as
    non-favorites.
    """

    title: str
    artist: str
    category: str
    description: Optional[str] = None
    audio_url: str
    cover_image: Optional[str] = None
    duration: int

    model_config = _CAMEL


class TrackUpdate(BaseModel):
    """Partial update for a track.

    Every field is optional and ``None`` means "leave unchanged".
    ``is_favorite=False`` is a real value and un-favorites the track.
    Audio URL and duration cannot be changed after creation; unknown
    keys are ignored.
    """

    title: Optional[str] = None
    artist: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[str] = None
    is_favorite: Optional[bool] = None

    model_config = _CAMEL


class TrackRead(BaseModel):
    """Public representation of a stored track."""

    id: int
    title: str
    artist: str
    category: str
    description: Optional[str] = None
    audio_url: str
    cover_image: Optional[str] = None
    duration: int
    is_favorite: bool
    created_at: datetime
    updated_at: datetime

    model_config = _CAMEL


@dataclass(frozen=True)
class TrackFilter:
    """Listing filter.  When several are set, the first non-empty one
    in the order favorites_only, search, category wins."""

    category: Optional[str] = None
    search: Optional[str] = None
    favorites_only: bool = False


def _lookup(payload: Mapping[str, Any], name: str) -> Any:
    alias = to_camel(name)
    if alias in payload:
        return payload[alias]
    return payload.get(name)


def _check_text(
    errors: List[FieldError],
    payload: Mapping[str, Any],
    name: str,
    label: str,
    *,
    required: bool,
    max_length: Optional[int] = None,
) -> None:
    """Validate one text field and append any failure to ``errors``.

    A required field must be a non-blank string.  For optional fields
    (and for every field of a partial update) ``None`` is accepted.
    """
    alias = to_camel(name)
    value = _lookup(payload, name)
    if value is None:
        if required:
            errors.append(FieldError(alias, f"{label} is required"))
        return
    if not isinstance(value, str):
        errors.append(FieldError(alias, f"{label} must be a string"))
        return
    if required and not value.strip():
        errors.append(FieldError(alias, f"{label} is required"))
        return
    if max_length is not None and len(value) > max_length:
        errors.append(FieldError(alias, f"{label} must be less than {max_length} characters"))


def validate_track_create(payload: Any) -> List[FieldError]:
    """Check a create payload and return all field errors found.

    ``duration`` may arrive as a JSON number with a zero fraction
    (``180.0``); it is accepted as the integer it represents.
    """
    if not isinstance(payload, Mapping):
        return [FieldError("body", "Request body must be a JSON object")]

    errors: List[FieldError] = []
    _check_text(errors, payload, "title", "Title", required=True, max_length=TITLE_MAX_LENGTH)
    _check_text(errors, payload, "artist", "Artist", required=True, max_length=ARTIST_MAX_LENGTH)
    _check_text(errors, payload, "category", "Category", required=True)
    _check_text(errors, payload, "description", "Description", required=False, max_length=DESCRIPTION_MAX_LENGTH)
    _check_text(errors, payload, "audio_url", "Audio URL", required=True)
    _check_text(errors, payload, "cover_image", "Cover image", required=False)

    duration = _lookup(payload, "duration")
    if duration is None:
        errors.append(FieldError("duration", "Duration is required"))
    elif isinstance(duration, bool) or not (
        isinstance(duration, int) or (isinstance(duration, float) and duration.is_integer())
    ):
        errors.append(FieldError("duration", "Duration must be an integer"))
    elif duration < 0:
        errors.append(FieldError("duration", "Duration must not be negative"))
    elif duration > DURATION_MAX:
        errors.append(FieldError("duration", "Duration is too large"))
    return errors


def validate_track_update(payload: Any) -> List[FieldError]:
    """Check a partial-update payload.

    Only supplied, non-null fields are checked.  Text fields that are
    required at rest may not be set to a blank string.
    """
    if not isinstance(payload, Mapping):
        return [FieldError("body", "Request body must be a JSON object")]

    errors: List[FieldError] = []
    for name, label, max_length in (
        ("title", "Title", TITLE_MAX_LENGTH),
        ("artist", "Artist", ARTIST_MAX_LENGTH),
        ("category", "Category", None),
    ):
        if _lookup(payload, name) is not None:
            _check_text(errors, payload, name, label, required=True, max_length=max_length)
    _check_text(errors, payload, "description", "Description", required=False, max_length=DESCRIPTION_MAX_LENGTH)
    _check_text(errors, payload, "cover_image", "Cover image", required=False)

    is_favorite = _lookup(payload, "is_favorite")
    if is_favorite is not None and not isinstance(is_favorite, bool):
        errors.append(FieldError("isFavorite", "Is favorite must be a boolean"))
    return errors
