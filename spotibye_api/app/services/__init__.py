"""
Service layer.

Each service encapsulates the business logic for a domain and talks to
the database only through the repository layer.
"""
