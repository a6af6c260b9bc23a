from fastapi import APIRouter, Depends

from eduhub.schemas import PlatformConfig, PlatformConfigView, User
from eduhub.routes.deps import get_current_user, require_admin
from eduhub.services import platform_config
from eduhub.storage import store

router = APIRouter(tags=["Config"])


@router.get("/config", response_model=PlatformConfigView)
async def get_config(user: User = Depends(get_current_user)):
    """Teacher profile, announcement and term plan for the caller's cohort"""
    return platform_config.view_for(store.config, user)


@router.get("/config/full", response_model=PlatformConfig)
async def get_full_config(_: User = Depends(require_admin)):
    return store.config


@router.put("/config", response_model=PlatformConfig)
async def update_config(request: PlatformConfig, _: User = Depends(require_admin)):
    """Replace the platform config as a whole"""
    await store.replace("config", request)
    print("✅ Platform config updated")
    return request
