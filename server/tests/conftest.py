import os
import tempfile

# Configure the environment before eduhub reads its settings
_DB_DIR = tempfile.mkdtemp(prefix="eduhub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/test.db"
os.environ["OPENAI_API_KEY"] = "test-key"
os.environ["ADMIN_EMAIL"] = "admin@test.local"
os.environ["ADMIN_PASSWORD"] = "secret"
os.environ["DEFAULT_EXAM_SECONDS"] = "60"

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from eduhub.database import SessionLocal, init_db  # noqa: E402
from eduhub.main import app  # noqa: E402
from eduhub.models import StoreEntry  # noqa: E402
from eduhub.schemas import (  # noqa: E402
    ContentRef, Course, Exam, ExamQuestion, Grade, Lecture, LectureType, User, UserRole,
)
from eduhub.services.llm_service import llm_service  # noqa: E402
from eduhub.services.sse_manager import notification_manager  # noqa: E402
from eduhub.storage import store  # noqa: E402


ADMIN_HEADERS = {"X-User-Id": "admin"}


class MemoryKV:
    """Dict-backed stand-in for the key-value store."""

    def __init__(self, fail: bool = False):
        self.data = {}
        self.saves = []
        self.fail = fail

    def init(self):
        pass

    async def get(self, key):
        if self.fail:
            return None
        return self.data.get(key)

    async def save(self, key, value):
        self.saves.append(key)
        if self.fail:
            return False
        self.data[key] = value
        return True


@pytest.fixture(autouse=True)
def fresh_state():
    """Empty collections, empty database table, no open streams."""
    init_db()
    with SessionLocal() as db:
        db.query(StoreEntry).delete()
        db.commit()
    store.__init__(store.kv)
    notification_manager.active_connections = {}
    yield
    store.exams.close_all()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def fake_ai(monkeypatch):
    """Replace the remote model with canned text per prompt."""
    calls = []

    async def complete(prompt_name, history=None, user_message=None, **variables):
        calls.append((prompt_name, history, user_message, variables))
        return f"generated:{prompt_name}"

    monkeypatch.setattr(llm_service, "complete", complete)
    return calls


def make_user(user_id="u1", grade=Grade.FIRST_SECONDARY, role=UserRole.STUDENT, **kwargs) -> User:
    return User(
        id=user_id,
        full_name=kwargs.pop("full_name", f"Student {user_id}"),
        email=kwargs.pop("email", f"{user_id}@example.com"),
        password=kwargs.pop("password", "pw"),
        grade=grade,
        role=role,
        **kwargs,
    )


def make_lectures(*ids):
    return [
        Lecture(id=i, title=f"Lecture {i}", type=LectureType.VIDEO,
                content=ContentRef(value=f"https://cdn.example.com/{i}.mp4"))
        for i in ids
    ]


def make_exam(exam_id="e1", answers=("B", "C"), duration_minutes=10) -> Exam:
    return Exam(
        id=exam_id,
        title="Unit test",
        duration_minutes=duration_minutes,
        questions=[
            ExamQuestion(id=f"q{n}", content=ContentRef(value=f"https://cdn.example.com/q{n}.png"),
                         correct_answer=a)
            for n, a in enumerate(answers, start=1)
        ],
    )


def make_course(course_id="c1", grade=Grade.FIRST_SECONDARY, lecture_ids=(), **kwargs) -> Course:
    return Course(
        id=course_id,
        title=kwargs.pop("title", f"Course {course_id}"),
        grade=grade,
        lectures=make_lectures(*lecture_ids),
        **kwargs,
    )


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)
