from fastapi import APIRouter, Depends, HTTPException
from typing import List

from eduhub.schemas import (
    BlockRequest, Certificate, CertificateRequest, CourseProgress, GRADE_LABELS,
    LevelRequest, ProgressResponse, StatsResponse, User,
)
from eduhub.routes.deps import get_current_user, require_admin, require_staff
from eduhub.services import accounts, progress
from eduhub.services.llm_service import llm_service
from eduhub.storage import store

router = APIRouter(tags=["Users"])


def _get_user_or_404(user_id: str) -> User:
    user = accounts.find_user(store.users, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _progress_report(user: User) -> ProgressResponse:
    unlocked = set(user.unlocked_courses)
    courses = [c for c in store.courses if c.id in unlocked]
    return ProgressResponse(
        overall=progress.overall_progress(user, store.courses),
        courses=[
            CourseProgress(
                course_id=c.id,
                title=c.title,
                completed=progress.completed_count(user, c),
                total=len(c.lectures),
                percentage=progress.lecture_progress(user, c),
            )
            for c in courses
        ],
    )


@router.get("/me", response_model=User)
async def get_me(user: User = Depends(get_current_user)):
    return user


@router.get("/me/progress", response_model=ProgressResponse)
async def get_my_progress(user: User = Depends(get_current_user)):
    return _progress_report(user)


@router.post("/me/lectures/{lecture_id}/toggle", response_model=User)
async def toggle_lecture(lecture_id: str, user: User = Depends(get_current_user)):
    """Mark a lecture complete, or un-mark it"""
    # Build from the stored copy so a concurrent change to this user is kept
    current = accounts.find_user(store.users, user.id) or user
    updated = progress.toggle_lecture_completion(current, lecture_id)
    if updated is not user:
        await store.replace("users", accounts.replace_user(store.users, updated))
    return updated


@router.get("/users", response_model=List[User])
async def list_users(_: User = Depends(require_staff)):
    return store.users


@router.get("/users/{user_id}/progress", response_model=ProgressResponse)
async def get_user_progress(user_id: str, _: User = Depends(require_staff)):
    return _progress_report(_get_user_or_404(user_id))


@router.post("/users/{user_id}/block", response_model=User)
async def block_user(user_id: str, request: BlockRequest, _: User = Depends(require_admin)):
    _get_user_or_404(user_id)
    await store.replace("users", accounts.set_blocked(store.users, user_id, request.blocked))
    print(f"✅ User {user_id} {'blocked' if request.blocked else 'unblocked'}")
    return _get_user_or_404(user_id)


@router.post("/users/{user_id}/level", response_model=User)
async def set_user_level(user_id: str, request: LevelRequest, _: User = Depends(require_admin)):
    _get_user_or_404(user_id)
    await store.replace("users", accounts.set_level(store.users, user_id, request.level))
    return _get_user_or_404(user_id)


@router.post("/users/{user_id}/certificates", response_model=Certificate)
async def issue_certificate(user_id: str, request: CertificateRequest, _: User = Depends(require_admin)):
    """Issue a certificate whose text is written by the AI assistant"""
    student = _get_user_or_404(user_id)
    content = await llm_service.generate_certificate_content(
        student.full_name, GRADE_LABELS[student.grade], request.type.value
    )
    # Re-read: the users collection may have been replaced while we awaited
    student = _get_user_or_404(user_id)
    updated, certificate = accounts.issue_certificate(student, content, request.type)
    await store.replace("users", accounts.replace_user(store.users, updated))
    print(f"✅ Certificate issued to {student.full_name}")
    return certificate


@router.get("/stats", response_model=StatsResponse)
async def get_stats(_: User = Depends(require_staff)):
    return accounts.platform_stats(store.users, store.courses)
