"""Root conftest — shared test configuration."""

import os

# Ensure tests never touch a developer database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DATABASE_CREATE_TABLES", "true")
os.environ.setdefault("LOG_FORMAT", "text")
