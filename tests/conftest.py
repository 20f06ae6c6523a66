"""Root conftest — shared test configuration."""

import os

# Never touch a real database or pick up a developer's .env seed
os.environ.setdefault(
    "CARDCZAR_DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("CARDCZAR_STORE_BACKEND", "memory")
os.environ.setdefault("CARDCZAR_LOG_FORMAT", "text")
