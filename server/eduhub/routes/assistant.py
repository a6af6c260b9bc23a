from fastapi import APIRouter, Depends

from eduhub.schemas import ChatRequest, ChatResponse, User
from eduhub.routes.deps import get_current_user
from eduhub.services.llm_service import llm_service

router = APIRouter(tags=["Assistant"])


@router.post("/assistant/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, _: User = Depends(get_current_user)):
    """Ask the study assistant. Always answers, with a fixed apology if the AI is unreachable."""
    reply = await llm_service.chat(
        request.message, [turn.model_dump() for turn in request.history]
    )
    return {"reply": reply}
