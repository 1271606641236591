"""Services Layer - the imperative shell around the in-memory store.

Invariants:
    - Every mutation goes through WhisprService: store + ledger + flush + event
    - Events are published after the mutation lock is released

Design Decisions:
    - LocalWhisprSession wraps the same service for embedded single-device use
"""
