"""
Top-level package for the SpotiBye Track Catalog API.

The server lives in the ``app`` subpackage
(``spotibye_api.app.main:app``); ``client`` provides a small HTTP
client for the same API.
"""

__all__ = []
