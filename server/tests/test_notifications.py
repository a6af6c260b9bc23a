import asyncio
from datetime import timedelta

from eduhub.schemas import Assignment, Grade, UserRole
from eduhub.services.notifications import (
    DeadlineWatcher, announce_new_course, due_deadlines, new_course_recipients,
)
from eduhub.services.sse_manager import NotificationManager
from eduhub.storage import PlatformStore

from conftest import MemoryKV, make_course, make_user, utc


NOW = utc(2024, 3, 1, 12, 0)


def _course_with_deadlines(grade=Grade.FIRST_SECONDARY):
    return make_course(
        "c1",
        grade=grade,
        assignments=[
            Assignment(id="soon", title="Essay", deadline=NOW + timedelta(hours=3)),
            Assignment(id="later", title="Project", deadline=NOW + timedelta(days=3)),
            Assignment(id="past", title="Quiz", deadline=NOW - timedelta(hours=1)),
        ],
    )


def test_new_course_goes_to_active_students_of_the_cohort():
    users = [
        make_user("a"),
        make_user("b", grade=Grade.SECOND_SECONDARY),
        make_user("c", is_blocked=True),
        make_user("d", role=UserRole.TEAM),
    ]
    recipients = new_course_recipients(make_course(grade=Grade.FIRST_SECONDARY), users)
    assert [u.id for u in recipients] == ["a"]


def test_announcement_reaches_open_streams():
    manager = NotificationManager()

    async def scenario():
        queue = await manager.connect("a")
        sent = announce_new_course(make_course(title="Grammar"), [make_user("a")], manager)
        return sent, queue.get_nowait()

    sent, message = asyncio.run(scenario())
    assert sent == 1
    assert message["type"] == "alert"
    assert "Grammar" in message["body"]


def test_only_deadlines_inside_window_are_due():
    due = due_deadlines(make_user(), [_course_with_deadlines()], NOW, timedelta(hours=24), set())
    assert [assignment_id for _, assignment_id, _ in due] == ["soon"]


def test_deadlines_skip_other_cohorts_and_staff():
    courses = [_course_with_deadlines(grade=Grade.THIRD_SECONDARY)]
    assert due_deadlines(make_user(), courses, NOW, timedelta(hours=24), set()) == []
    staff = make_user("t", role=UserRole.TEAM)
    assert due_deadlines(staff, [_course_with_deadlines()], NOW, timedelta(hours=24), set()) == []


def test_watcher_warns_each_student_once():
    store = PlatformStore(MemoryKV())
    store.users = [make_user("a"), make_user("b")]
    store.courses = [_course_with_deadlines()]
    manager = NotificationManager()
    watcher = DeadlineWatcher(store, manager, warning_hours=24)

    async def scenario():
        queue = await manager.connect("a")
        first = await watcher.run_once(now=NOW)
        second = await watcher.run_once(now=NOW + timedelta(minutes=10))
        return first, second, queue.qsize()

    first, second, queued = asyncio.run(scenario())
    assert first == 2
    assert second == 0
    assert queued == 1


def test_publish_without_listeners_is_a_no_op():
    manager = NotificationManager()
    manager.publish("nobody", {"type": "alert"})
    manager.alert("nobody", "Title", "Body")
    assert manager.active_connections == {}


def test_disconnect_drops_empty_channels():
    manager = NotificationManager()

    async def scenario():
        queue = await manager.connect("a")
        manager.disconnect("a", queue)

    asyncio.run(scenario())
    assert manager.active_connections == {}
