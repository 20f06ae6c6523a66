"""Services Layer — game orchestration, SQL game-state store and card catalog.

Invariants:
    - Services call the pure core for every rule decision
    - Store/catalog implementations satisfy core/repository_protocols.py

Design Decisions:
    - One service class per concern; routes depend on GameService only for game actions
"""
