"""
Device store.

Responsibilities:
- Own the SQLAlchemy engine and session factory for the device database.
- Define the ``devices`` table and its uniqueness constraint.
- Answer marketing-name lookups against the normalized data.
"""
