"""Infrastructure Layer — stores, notifier, DB pool and cross-cutting concerns.

Invariants:
    - Infrastructure never imports round_machine: it stores and ships state,
      it never decides game rules
    - All SQLAlchemy failures mapped to DatabaseError

Design Decisions:
    - In-memory store and SQL store share the GameStateStore protocol, selected
      by settings.store_backend
"""
