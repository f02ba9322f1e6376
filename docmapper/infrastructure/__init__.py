"""Infrastructure Layer — the SQL document store and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/
    - All driver failures mapped to StoreError / StoreCommitError (core/errors.py)
"""
