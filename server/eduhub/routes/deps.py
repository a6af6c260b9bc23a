"""
Request dependencies shared by the routers.

Identity is whatever the client puts in X-User-Id; there is no session or
token layer.
"""
from fastapi import Header, HTTPException, Depends

from eduhub.schemas import User, UserRole
from eduhub.services.accounts import ADMIN_ID, admin_user, find_user
from eduhub.storage import store


async def get_current_user(x_user_id: str = Header(...)) -> User:
    if x_user_id == ADMIN_ID:
        return admin_user()
    user = find_user(store.users, x_user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if user.is_blocked:
        raise HTTPException(status_code=403, detail="This account has been blocked")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Admin only")
    return user


async def require_staff(user: User = Depends(get_current_user)) -> User:
    if user.role not in (UserRole.ADMIN, UserRole.TEAM):
        raise HTTPException(status_code=403, detail="Staff only")
    return user
