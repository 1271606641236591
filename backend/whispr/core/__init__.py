"""Core Layer - domain logic with no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Time and randomness are injected; given the same clock and Random,
      every operation is deterministic

Design Decisions:
    - Functional core separated from imperative shell: the content store and
      profile ledger are in-memory objects, the shell persists and broadcasts
"""
