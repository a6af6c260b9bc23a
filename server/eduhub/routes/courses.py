from fastapi import APIRouter, Depends, HTTPException
from typing import List

from eduhub.schemas import Course, CourseCreate, DescribeRequest, DescribeResponse, User
from eduhub.routes.deps import get_current_user, require_admin
from eduhub.services import catalog, entitlement, progress
from eduhub.services.llm_service import llm_service
from eduhub.services.notifications import announce_new_course
from eduhub.services.sse_manager import notification_manager
from eduhub.storage import store

router = APIRouter(tags=["Courses"])


def _locked_view(course: Course) -> Course:
    """What a user without access may see: the listing, not the content."""
    return course.model_copy(update={"lectures": [], "exams": [], "assignments": []})


@router.get("/courses", response_model=List[Course])
async def list_courses(user: User = Depends(get_current_user)):
    return [
        c if entitlement.can_access(user, c) else _locked_view(c)
        for c in catalog.visible_courses(user, store.courses)
    ]


@router.get("/courses/{course_id}")
async def open_course(course_id: str, user: User = Depends(get_current_user)):
    """
    Open a course. The course becomes the user's selection until they open
    another one or it expires.
    """
    course = catalog.find_course(store.courses, course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")

    store.select_course(user.id, course_id)
    unlocked = entitlement.can_access(user, course)
    return {
        "course": course if unlocked else _locked_view(course),
        "is_unlocked": unlocked,
        "progress": progress.lecture_progress(user, course),
    }


@router.post("/courses", response_model=Course)
async def create_course(request: CourseCreate, _: User = Depends(require_admin)):
    if not request.description:
        request = request.model_copy(
            update={"description": await llm_service.generate_course_description(request.title)}
        )
    courses, course = catalog.create_course(store.courses, request)
    await store.replace("courses", courses)
    print(f"✅ Course created: {course.title}")

    announce_new_course(course, store.users, notification_manager)
    return course


@router.put("/courses/{course_id}", response_model=Course)
async def update_course(course_id: str, request: CourseCreate, _: User = Depends(require_admin)):
    courses, course = catalog.update_course(store.courses, course_id, request)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    await store.replace("courses", courses)
    return course


@router.delete("/courses/{course_id}")
async def delete_course(course_id: str, _: User = Depends(require_admin)):
    if catalog.find_course(store.courses, course_id) is None:
        raise HTTPException(status_code=404, detail="Course not found")
    await store.replace("courses", catalog.delete_course(store.courses, course_id))
    store.clear_selections({course_id})
    return {"success": True}


@router.post("/courses/describe", response_model=DescribeResponse)
async def describe_course(request: DescribeRequest, _: User = Depends(require_admin)):
    """Draft a course description with the AI assistant"""
    return {"description": await llm_service.generate_course_description(request.title)}
