"""
Key-value persistence for the platform collections.

Each logical collection ("users", "courses", "config", "activationCodes") is
saved whole under its name and loaded back verbatim. Failures are printed and
degrade to "absent" / "not saved" so the platform keeps running in memory.
"""
import asyncio
from typing import Any, Optional

from eduhub.database import SessionLocal, init_db
from eduhub.models import StoreEntry


class KeyValueStore:
    """Async get/save by key over the store_entries table."""

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory
        self._ready = False

    def init(self):
        """Create the table if needed."""
        if not self._ready:
            init_db()
            self._ready = True

    def _get(self, key: str) -> Optional[Any]:
        self.init()
        with self.session_factory() as db:
            entry = db.get(StoreEntry, key)
            return entry.value if entry else None

    def _save(self, key: str, value: Any) -> None:
        self.init()
        with self.session_factory() as db:
            entry = db.get(StoreEntry, key)
            if entry is None:
                db.add(StoreEntry(key=key, value=value))
            else:
                entry.value = value
            db.commit()

    async def get(self, key: str) -> Optional[Any]:
        """Whatever was last saved under key, or None if absent or unreadable."""
        try:
            return await asyncio.to_thread(self._get, key)
        except Exception as e:
            print(f"❌ Store load error ({key}): {e}")
            return None

    async def save(self, key: str, value: Any) -> bool:
        try:
            await asyncio.to_thread(self._save, key, value)
            return True
        except Exception as e:
            print(f"❌ Store save error ({key}): {e}")
            return False


# Singleton instance
kv_store = KeyValueStore()
