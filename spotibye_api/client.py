"""Track catalog API client.

A thin wrapper around the track endpoints using ``requests``.  Every
high-level method returns a tuple ``(data, error)``:

* on success ``data`` is the decoded JSON body (``None`` for an empty
  body, e.g. after a delete) and ``error`` is ``None``;
* on failure ``data`` is ``None`` and ``error`` is a dictionary with
  ``status_code`` and ``message`` keys, plus ``errors`` (field ->
  message) when the server rejected the payload.

Example::

    api = TrackCatalogAPI(base_url="http://localhost:8080")
    track, error = api.create_track({"title": "Song", ...})
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class TrackCatalogAPI:
    """Client for the ``/api/tracks`` endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        prefix: str = "/api/tracks",
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:8080``.
            prefix: Path of the track collection.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.prefix = "/" + prefix.strip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helper
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str = "", *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request against the track collection.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``PATCH``, ``DELETE``).
            path: Path relative to the collection (e.g. ``/7/favorite``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        """
        url = f"{self.base_url}{self.prefix}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            error: Dict[str, Any] = {"status_code": None, "message": ""}
            if exc.response is not None:
                error["status_code"] = exc.response.status_code
                try:
                    body = exc.response.json()
                except ValueError:
                    body = None
                if isinstance(body, dict):
                    error["message"] = body.get("message") or body.get("detail") or ""
                    if body.get("errors"):
                        error["errors"] = body["errors"]
                else:
                    error["message"] = exc.response.text
            if not error["message"]:
                error["message"] = str(exc)
            logger.error("API request failed (%s): %s", error["status_code"], error["message"])
            return None, error
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Track operations
    # ------------------------------------------------------------------
    def list_tracks(
        self,
        *,
        category: Optional[str] = None,
        search: Optional[str] = None,
        favorites: Optional[bool] = None,
    ) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """List tracks, optionally filtered.

        The server applies only one filter: favorites, then search,
        then category.
        """
        params: Dict[str, Any] = {}
        if category:
            params["category"] = category
        if search:
            params["search"] = search
        if favorites is not None:
            params["favorites"] = "true" if favorites else "false"
        data, error = self._request("GET", params=params or None)
        return (data or []), error

    def get_track(self, track_id: int) -> Result:
        return self._request("GET", f"/{track_id}")

    def create_track(self, track: Dict[str, Any]) -> Result:
        """Create a track from a camelCase payload (``audioUrl``, ``coverImage``...)."""
        return self._request("POST", json_body=track)

    def update_track(self, track_id: int, changes: Dict[str, Any]) -> Result:
        return self._request("PUT", f"/{track_id}", json_body=changes)

    def delete_track(self, track_id: int) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/{track_id}")
        return error is None, error

    def toggle_favorite(self, track_id: int) -> Result:
        return self._request("PATCH", f"/{track_id}/favorite")
