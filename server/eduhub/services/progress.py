"""
Progress Calculator.

Pure functions mapping a user's completed lectures onto course percentages.
"""
from typing import List
from eduhub.schemas import User, Course, UserRole


def _round_half_up(numerator: int, denominator: int) -> int:
    """Integer round-half-up of numerator / denominator (both non-negative)."""
    return (2 * numerator + denominator) // (2 * denominator)


def completed_count(user: User, course: Course) -> int:
    """Number of the course's lectures the user has completed."""
    done = set(user.completed_lectures)
    return len({lecture.id for lecture in course.lectures} & done)


def lecture_progress(user: User, course: Course) -> int:
    """
    Percentage of a course's lectures the user has completed.

    A course with no lectures is 0%, never an error.
    """
    total = len({lecture.id for lecture in course.lectures})
    if total == 0:
        return 0
    return _round_half_up(100 * completed_count(user, course), total)


def overall_progress(user: User, courses: List[Course]) -> int:
    """Average of lecture_progress over the courses the user has unlocked."""
    unlocked = set(user.unlocked_courses)
    owned = [c for c in courses if c.id in unlocked]
    if not owned:
        return 0
    total = sum(lecture_progress(user, c) for c in owned)
    return _round_half_up(total, len(owned))


def toggle_lecture_completion(user: User, lecture_id: str) -> User:
    """
    Mark a lecture complete, or un-mark it if it already is.

    Returns a new User; admins are returned unchanged.
    """
    if user.role == UserRole.ADMIN:
        return user
    if lecture_id in user.completed_lectures:
        completed = [lid for lid in user.completed_lectures if lid != lecture_id]
    else:
        completed = user.completed_lectures + [lecture_id]
    return user.model_copy(update={"completed_lectures": completed})
