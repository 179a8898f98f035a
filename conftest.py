"""Global pytest configuration."""

import os

# Point settings at SQLite and the stub gateway before any imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("OPENAI_API_KEY", "")
