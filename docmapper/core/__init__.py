"""Core Layer — pure mapping logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, infrastructure/, db/ or models/
    - All functions are pure and deterministic; async appears only in
      store_protocols.py signatures

Design Decisions:
    - Functional core separated from imperative shell: validation and filter
      translation are testable without a store
"""
