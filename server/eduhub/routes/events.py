import asyncio
import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from eduhub.schemas import User
from eduhub.routes.deps import get_current_user
from eduhub.services.sse_manager import notification_manager

router = APIRouter(tags=["Events"])


@router.get("/events")
async def user_events(request: Request, user: User = Depends(get_current_user)):
    """
    SSE Endpoint for user-facing alerts and exam results.
    """
    async def event_generator():
        queue = await notification_manager.connect(user.id)
        try:
            while True:
                # Check for client disconnect
                if await request.is_disconnected():
                    break
                    
                # Wait for message with timeout
                try:
                    data = await asyncio.wait_for(queue.get(), timeout=30.0)
                    yield f"data: {json.dumps(data, ensure_ascii=False)}\n\n"
                except asyncio.TimeoutError:
                    # Send ping to keep connection alive
                    yield ": ping\n\n"
        except asyncio.CancelledError:
            pass
        finally:
            notification_manager.disconnect(user.id, queue)

    return StreamingResponse(event_generator(), media_type="text/event-stream")
