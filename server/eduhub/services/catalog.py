"""
Course catalog: admin create / update / delete and per-user visibility.
"""
import uuid
from typing import List, Optional, Tuple

from eduhub.schemas import Course, CourseCreate, User, UserRole


def find_course(courses: List[Course], course_id: str) -> Optional[Course]:
    return next((c for c in courses if c.id == course_id), None)


def find_exam(course: Course, exam_id: str):
    return next((e for e in course.exams if e.id == exam_id), None)


def create_course(courses: List[Course], payload: CourseCreate) -> Tuple[List[Course], Course]:
    course = Course(id=uuid.uuid4().hex[:9], **payload.model_dump())
    return courses + [course], course


def update_course(courses: List[Course], course_id: str,
                  payload: CourseCreate) -> Tuple[List[Course], Optional[Course]]:
    """Replace a course's content, keeping its id. (courses, None) if unknown."""
    if find_course(courses, course_id) is None:
        return courses, None
    updated = Course(id=course_id, **payload.model_dump())
    return [updated if c.id == course_id else c for c in courses], updated


def delete_course(courses: List[Course], course_id: str) -> List[Course]:
    return [c for c in courses if c.id != course_id]


def visible_courses(user: User, courses: List[Course]) -> List[Course]:
    """Staff see everything; students see their own cohort."""
    if user.role in (UserRole.ADMIN, UserRole.TEAM):
        return list(courses)
    return [c for c in courses if c.grade == user.grade]
