"""
Notification triggers: new course for a cohort, approaching assignment deadlines.

The functions here decide who gets told what; delivery goes through the
NotificationManager.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Set, Tuple

from eduhub.config import settings
from eduhub.schemas import Course, User, UserRole
from eduhub.services.periodic import PeriodicTask
from eduhub.services.sse_manager import NotificationManager


def new_course_recipients(course: Course, users: List[User]) -> List[User]:
    """Active students in the course's cohort."""
    return [
        u for u in users
        if u.role == UserRole.STUDENT and not u.is_blocked and u.grade == course.grade
    ]


def announce_new_course(course: Course, users: List[User], manager: NotificationManager) -> int:
    recipients = new_course_recipients(course, users)
    for user in recipients:
        manager.alert(
            user.id,
            "New course available! 📚",
            f"Course added: {course.title}. Start studying now!",
        )
    return len(recipients)


def due_deadlines(
    user: User,
    courses: List[Course],
    now: datetime,
    warning: timedelta,
    already_notified: Set[Tuple[str, str]],
) -> List[Tuple[Course, str, str]]:
    """
    (course, assignment id, assignment title) for deadlines inside the
    warning window that this user has not been told about yet.
    """
    if user.role != UserRole.STUDENT:
        return []
    due = []
    for course in courses:
        if course.grade != user.grade:
            continue
        for assignment in course.assignments:
            remaining = assignment.deadline - now
            if timedelta(0) < remaining < warning and (user.id, assignment.id) not in already_notified:
                due.append((course, assignment.id, assignment.title))
    return due


class DeadlineWatcher(PeriodicTask):
    """Warns each student once per assignment as its deadline approaches."""

    name = "Deadline check"

    def __init__(self, store, manager: NotificationManager, interval_seconds: float = 600,
                 warning_hours: Optional[int] = None):
        super().__init__(interval_seconds)
        self.store = store
        self.manager = manager
        self.warning = timedelta(hours=warning_hours or settings.deadline_warning_hours)
        self.notified: Set[Tuple[str, str]] = set()

    async def run_once(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.now(timezone.utc)
        sent = 0
        for user in self.store.users:
            for course, assignment_id, title in due_deadlines(
                user, self.store.courses, now, self.warning, self.notified
            ):
                self.manager.alert(
                    user.id,
                    "Assignment due soon! ✍️",
                    f"The deadline for \"{title}\" in {course.title} is approaching.",
                )
                self.notified.add((user.id, assignment_id))
                sent += 1
        return sent
