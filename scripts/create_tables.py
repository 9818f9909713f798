"""Create all tables directly, bypassing Alembic (local development only)."""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parent.parent))

from flashcards.db import models  # noqa: F401  # Imported for side effects
from flashcards.db.base import Base
from flashcards.db.session import engine

if __name__ == "__main__":
    print("Creating tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created.")
