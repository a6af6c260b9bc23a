"""
In-memory platform state: users, courses, activation codes and config.

Collections are never mutated in place. Every change builds a new list and
hands it to replace(), which swaps it in and persists it under its key.
"""
import asyncio
from typing import Dict, List, Set

from eduhub.schemas import ActivationCode, Course, PlatformConfig, User
from eduhub.services.exam_session import ExamSessionRegistry
from eduhub.services.persistence import KeyValueStore, kv_store


# attribute name -> (store key, model)
COLLECTIONS = {
    "users": ("users", User),
    "courses": ("courses", Course),
    "activation_codes": ("activationCodes", ActivationCode),
}
CONFIG_KEY = "config"


class PlatformStore:
    """Owner of the shared collections."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv
        self.users: List[User] = []
        self.courses: List[Course] = []
        self.activation_codes: List[ActivationCode] = []
        self.config = PlatformConfig()
        # user_id -> id of the course that user has open
        self.selected_courses: Dict[str, str] = {}
        self.exams = ExamSessionRegistry()
        self._save_lock = asyncio.Lock()

    async def load(self) -> None:
        """Load every collection; absent or unreadable keys keep their defaults."""
        for attr, (key, model) in COLLECTIONS.items():
            raw = await self.kv.get(key)
            if raw:
                try:
                    setattr(self, attr, [model.model_validate(item) for item in raw])
                except Exception as e:
                    print(f"⚠️ Ignoring unreadable '{key}' collection: {e}")
        raw_config = await self.kv.get(CONFIG_KEY)
        if raw_config:
            try:
                self.config = PlatformConfig.model_validate(raw_config)
            except Exception as e:
                print(f"⚠️ Ignoring unreadable '{CONFIG_KEY}': {e}")
        print(f"💾 Loaded {len(self.users)} users, {len(self.courses)} courses, "
              f"{len(self.activation_codes)} activation codes")

    async def _persist(self, attr: str) -> bool:
        # Dump under the lock so the last save always writes the newest collection
        async with self._save_lock:
            value = getattr(self, attr)
            if attr == "config":
                return await self.kv.save(CONFIG_KEY, value.model_dump(mode="json"))
            key, _ = COLLECTIONS[attr]
            return await self.kv.save(key, [item.model_dump(mode="json") for item in value])

    async def replace(self, attr: str, value) -> bool:
        """Swap in a new collection, then persist it. In-memory state wins if the save fails."""
        setattr(self, attr, value)
        return await self._persist(attr)

    async def replace_many(self, **collections) -> bool:
        """Swap in several collections together, before any save is awaited."""
        for attr, value in collections.items():
            setattr(self, attr, value)
        saved = True
        for attr in collections:
            saved = await self._persist(attr) and saved
        return saved

    def select_course(self, user_id: str, course_id: str) -> None:
        self.selected_courses[user_id] = course_id

    def clear_selections(self, course_ids: Set[str]) -> None:
        """Drop any open-course selection pointing at a removed course."""
        self.selected_courses = {
            uid: cid for uid, cid in self.selected_courses.items() if cid not in course_ids
        }


# Global platform state
store = PlatformStore(kv_store)
