"""Root conftest — shared test configuration."""

import os

# Never touch a real database, cipher key or analytics project from tests
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("FIELD_CIPHER", "plaintext")
os.environ.setdefault("ANALYTICS_BACKEND", "logging")
