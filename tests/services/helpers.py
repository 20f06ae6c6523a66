"""HTTP test helpers — identity headers and a ready-to-play seating."""

PLAYERS = [
    {"id": "u-ana", "name": "Ana"},
    {"id": "u-bo", "name": "Bo"},
    {"id": "u-cy", "name": "Cy"},
]


def as_user(user_id: str, name: str = "") -> dict:
    """Identity headers normally set by the upstream auth proxy."""
    return {"X-User-Id": user_id, "X-User-Name": name}
