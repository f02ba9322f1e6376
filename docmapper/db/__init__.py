"""Database Infrastructure — SQLAlchemy Base for the document table.

Invariants:
    - Single async engine per store (created by SqlDocumentStore)
"""
