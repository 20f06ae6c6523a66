"""Core Layer — pure game rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Randomness enters only through an explicit RandomSource argument

Design Decisions:
    - Functional core separated from imperative shell: routes load, core mutates,
      store persists, notifier pushes
"""
