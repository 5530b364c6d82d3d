"""
Repository layer.

Repositories hold the SQL for one table each.  They work on a
connection supplied by the caller and leave transaction control to it.
"""
