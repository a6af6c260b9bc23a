"""
Expiration Sweeper.

Removes courses whose expiry timestamp has passed. sweep() is pure; the
ExpirationSweeper runs it at load time and on an interval against the live
collection held by the platform store.
"""
from datetime import datetime, timezone
from typing import List, NamedTuple, Optional

from eduhub.schemas import Course
from eduhub.services.periodic import PeriodicTask


class SweepResult(NamedTuple):
    surviving: List[Course]
    removed: List[Course]


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def is_expired(course: Course, now: datetime) -> bool:
    return course.expiry_date is not None and _as_utc(course.expiry_date) <= _as_utc(now)


def sweep(courses: List[Course], now: Optional[datetime] = None) -> SweepResult:
    """A course survives iff it has no expiry date or the date is still ahead."""
    now = now or datetime.now(timezone.utc)
    surviving, removed = [], []
    for course in courses:
        (removed if is_expired(course, now) else surviving).append(course)
    return SweepResult(surviving, removed)


class ExpirationSweeper(PeriodicTask):
    """Deletes expired courses from the store. No soft delete, no recovery."""

    name = "Expiration sweep"

    def __init__(self, store, interval_seconds: float = 60):
        super().__init__(interval_seconds)
        self.store = store

    async def run_once(self, now: Optional[datetime] = None) -> List[Course]:
        result = sweep(self.store.courses, now)
        if not result.removed:
            return []

        for course in result.removed:
            print(f"🧹 Course \"{course.title}\" has expired and was removed")
        await self.store.replace("courses", result.surviving)
        self.store.clear_selections({c.id for c in result.removed})
        return result.removed
