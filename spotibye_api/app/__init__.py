"""
Application package initializer.

This package contains the entrypoint for the API and its layers:
``api`` (routes), ``schemas`` (payload models and validation),
``services`` (use cases), ``repositories`` (SQL access) and ``core``
(configuration, logging, database and error handling).
"""

from .main import app  # noqa: F401
