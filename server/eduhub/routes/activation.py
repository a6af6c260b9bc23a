from fastapi import APIRouter, Depends, HTTPException
from typing import List

from eduhub.schemas import ActivateRequest, ActivateResponse, ActivationCode, User, UserRole
from eduhub.routes.deps import get_current_user, require_admin
from eduhub.services import accounts, catalog, entitlement
from eduhub.storage import store

router = APIRouter(tags=["Activation"])


@router.post("/courses/{course_id}/activate", response_model=ActivateResponse)
async def activate_course(course_id: str, request: ActivateRequest, user: User = Depends(get_current_user)):
    """
    Unlock a paid course with a one-time code.
    A wrong, used or mismatched code is reported as success=false.
    """
    code = request.code.strip()
    if not code:
        raise HTTPException(status_code=400, detail="Please enter an activation code first")

    course = catalog.find_course(store.courses, course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    # Admins and free courses need no code; leave it for someone who does
    if user.role == UserRole.ADMIN or not course.is_paid:
        return {"success": True, "course_id": course_id}

    current = accounts.find_user(store.users, user.id) or user
    result = entitlement.activate(store.activation_codes, current, course_id, code)
    if result.success:
        await store.replace_many(
            activation_codes=result.codes,
            users=accounts.replace_user(store.users, result.user),
        )
        print(f"✅ Course {course_id} activated for {user.id}")
    return {"success": result.success, "course_id": course_id}


@router.post("/courses/{course_id}/codes", response_model=ActivationCode)
async def issue_code(course_id: str, _: User = Depends(require_admin)):
    course = catalog.find_course(store.courses, course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    codes, code = entitlement.issue_code(store.activation_codes, course)
    await store.replace("activation_codes", codes)
    print(f"✅ Generated code {code.code} for {course.title}")
    return code


@router.get("/codes", response_model=List[ActivationCode])
async def list_codes(_: User = Depends(require_admin)):
    """All codes, newest first"""
    return list(reversed(store.activation_codes))


@router.delete("/codes/{code}")
async def revoke_code(code: str, _: User = Depends(require_admin)):
    if not any(c.code == code for c in store.activation_codes):
        raise HTTPException(status_code=404, detail="Activation code not found")
    await store.replace("activation_codes", entitlement.revoke(store.activation_codes, code))
    return {"success": True}
