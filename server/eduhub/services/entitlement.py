"""
Entitlement Manager.

One-time activation codes that unlock a single paid course for a single
user. Every function takes the current collections and returns new ones;
callers replace their collections with the result.
"""
import secrets
import string
from datetime import datetime, timezone
from typing import List, NamedTuple, Optional, Callable

from eduhub.config import settings
from eduhub.schemas import ActivationCode, Course, User, UserRole


CODE_ALPHABET = string.ascii_uppercase + string.digits


class Activation(NamedTuple):
    """Outcome of an activation attempt. On failure the inputs come back untouched."""
    success: bool
    codes: List[ActivationCode]
    user: User


def can_access(user: User, course: Course) -> bool:
    """Free courses, admins, and users who unlocked the course."""
    return (
        not course.is_paid
        or user.role == UserRole.ADMIN
        or course.id in user.unlocked_courses
    )


def activate(codes: List[ActivationCode], user: User, course_id: str, code: str) -> Activation:
    """
    Consume an unused code bound to course_id and unlock the course for user.

    Wrong code, wrong course, or an already used code all fail with no
    state change.
    """
    match = next(
        (c for c in codes if c.code == code and c.course_id == course_id and not c.is_used),
        None,
    )
    if match is None:
        return Activation(False, codes, user)

    new_codes = [
        c.model_copy(update={"is_used": True, "used_by": user.id}) if c is match else c
        for c in codes
    ]
    unlocked = user.unlocked_courses
    if course_id not in unlocked:
        unlocked = unlocked + [course_id]
    new_user = user.model_copy(update={"unlocked_courses": unlocked})
    return Activation(True, new_codes, new_user)


def _random_code(length: int) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def issue_code(
    codes: List[ActivationCode],
    course: Course,
    length: Optional[int] = None,
    generator: Callable[[int], str] = _random_code,
) -> tuple[List[ActivationCode], ActivationCode]:
    """
    Generate a code unique within the existing collection, bound to course.

    Returns (new collection, new code).
    """
    length = length or settings.activation_code_length
    taken = {c.code for c in codes}
    value = generator(length)
    while value in taken:
        value = generator(length)

    new_code = ActivationCode(
        code=value,
        course_id=course.id,
        course_title=course.title,
        is_used=False,
        created_at=datetime.now(timezone.utc),
    )
    return codes + [new_code], new_code


def revoke(codes: List[ActivationCode], code: str) -> List[ActivationCode]:
    """Remove a code for good. Users who already consumed it keep their unlock."""
    return [c for c in codes if c.code != code]
