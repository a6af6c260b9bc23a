"""
Account operations on the users collection.

Everything returns new objects / collections; the caller swaps them in.
"""
import random
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from eduhub.config import settings
from eduhub.schemas import (
    Certificate, CertificateType, Course, Grade, SignupRequest,
    StudentLevel, User, UserRole,
)


ADMIN_ID = "admin"

CERTIFICATE_TITLES: Dict[CertificateType, str] = {
    CertificateType.EXCELLENCE: "Certificate of Excellence 🏆",
    CertificateType.PROGRESS: "Certificate of Progress 📈",
    CertificateType.COMPLETION: "Certificate of Completion 🎓",
}


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user(users: List[User], user_id: str) -> Optional[User]:
    return next((u for u in users if u.id == user_id), None)


def replace_user(users: List[User], user: User) -> List[User]:
    """New collection with the user of the same id swapped for user."""
    return [user if u.id == user.id else u for u in users]


def admin_user() -> User:
    """The synthetic admin account. Never stored in the users collection."""
    return User(
        id=ADMIN_ID,
        full_name=settings.teacher_name,
        email=settings.admin_email,
        student_code="ADMIN-01",
        grade=Grade.THIRD_SECONDARY,
        role=UserRole.ADMIN,
        level=StudentLevel.EXCELLENT,
    )


def signup(users: List[User], form: SignupRequest) -> Tuple[List[User], Optional[User]]:
    """Register a new student. Returns (users, None) if the email is taken."""
    email = _normalize_email(form.email)
    if any(_normalize_email(u.email) == email for u in users):
        return users, None

    user = User(
        id=uuid.uuid4().hex[:9],
        full_name=form.full_name,
        email=email,
        password=form.password,
        phone=form.phone.strip(),
        parent_phone=form.parent_phone,
        student_code=form.student_code or str(random.randint(1000, 9999)),
        governorate=form.governorate,
        grade=form.grade,
        role=UserRole.STUDENT,
        level=StudentLevel.AVERAGE,
        login_count=1,
        created_at=datetime.now(timezone.utc),
    )
    return users + [user], user


class LoginError(Exception):
    """Raised when credentials do not match or the account is blocked."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


def login(users: List[User], email: str, password: str) -> Tuple[List[User], User]:
    """
    Authenticate and count the login.

    The configured admin credentials produce the synthetic admin user.
    Raises LoginError("invalid") or LoginError("blocked").
    """
    email = _normalize_email(email)
    if email == _normalize_email(settings.admin_email) and password == settings.admin_password:
        return users, admin_user()

    user = next(
        (u for u in users if _normalize_email(u.email) == email and u.password == password),
        None,
    )
    if user is None:
        raise LoginError("invalid")
    if user.is_blocked:
        raise LoginError("blocked")

    updated = user.model_copy(update={"login_count": user.login_count + 1})
    return replace_user(users, updated), updated


def set_blocked(users: List[User], user_id: str, blocked: bool) -> List[User]:
    user = find_user(users, user_id)
    if user is None:
        return users
    return replace_user(users, user.model_copy(update={"is_blocked": blocked}))


def set_level(users: List[User], user_id: str, level: StudentLevel) -> List[User]:
    user = find_user(users, user_id)
    if user is None:
        return users
    return replace_user(users, user.model_copy(update={"level": level}))


def issue_certificate(user: User, content: str,
                      certificate_type: CertificateType = CertificateType.EXCELLENCE) -> Tuple[User, Certificate]:
    """Attach a certificate carrying the given text to the user."""
    certificate = Certificate(
        id=uuid.uuid4().hex[:9],
        title=CERTIFICATE_TITLES[certificate_type],
        content=content,
        date=datetime.now(timezone.utc).date().isoformat(),
        type=certificate_type,
    )
    updated = user.model_copy(update={"certificates": user.certificates + [certificate]})
    return updated, certificate


def platform_stats(users: List[User], courses: List[Course]) -> dict:
    students = [u for u in users if u.role == UserRole.STUDENT]
    return {
        "total_students": len(students),
        "total_courses": len(courses),
        "level_counts": {
            level: sum(1 for u in students if u.level == level) for level in StudentLevel
        },
    }
