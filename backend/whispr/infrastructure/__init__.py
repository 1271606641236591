"""Infrastructure Layer - persistence backends, debounced flushing, realtime fan-out, logging.

Invariants:
    - Implements the Protocols declared in core/repository_protocols.py
    - Infrastructure failures surface as PersistenceError, never raw driver errors
"""
