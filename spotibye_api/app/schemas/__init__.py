"""
Pydantic schema definitions for API payloads.

Schemas are separated from the repository records to decouple the API
representation from persistence.
"""
