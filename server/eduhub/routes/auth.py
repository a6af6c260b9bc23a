from fastapi import APIRouter, HTTPException

from eduhub.schemas import LoginRequest, SignupRequest, User
from eduhub.services import accounts
from eduhub.storage import store

router = APIRouter(tags=["Auth"])


@router.post("/signup", response_model=User)
async def signup(request: SignupRequest):
    """Register a new student account"""
    users, user = accounts.signup(store.users, request)
    if user is None:
        raise HTTPException(status_code=409, detail="Email is already registered")
    await store.replace("users", users)
    print(f"✅ New student registered: {user.email}")
    return user


@router.post("/login", response_model=User)
async def login(request: LoginRequest):
    """
    Log in with email and password.
    The returned user id goes into the X-User-Id header of later calls.
    """
    try:
        users, user = accounts.login(store.users, request.email, request.password)
    except accounts.LoginError as e:
        if e.reason == "blocked":
            raise HTTPException(status_code=403, detail="This account has been blocked by the administration")
        raise HTTPException(status_code=401, detail="Incorrect email or password")

    if users is not store.users:
        await store.replace("users", users)
    return user
