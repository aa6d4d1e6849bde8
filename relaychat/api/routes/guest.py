# api/routes/guest.py

from fastapi import APIRouter, Depends, HTTPException

from relaychat.core.chat import guest_reply
from relaychat.core.state import ChatState, ServiceNotConfigured, get_state
from relaychat.models.chat import GuestChatRequest, GuestChatResponse
from relaychat.utils.logger import logger
from relaychat.utils.rotator import UpstreamUnavailable

router = APIRouter(prefix="/api/guest", tags=["Guest"])

@router.post("/chat", response_model=GuestChatResponse)
async def guest_chat(
	req: GuestChatRequest,
	state: ChatState = Depends(get_state)
):
	"""Answer a guest message. Only the client keeps the history."""
	if not req.message or not req.message.strip():
		raise HTTPException(status_code=400, detail="Message is required")
	try:
		logger().info(f"POST /api/guest/chat model={req.model} history={len(req.history or [])}")
		return {"response": await guest_reply(req.message, req.history, req.model, state)}
	except ServiceNotConfigured as e:
		raise HTTPException(status_code=503, detail=str(e))
	except UpstreamUnavailable as e:
		raise HTTPException(status_code=502, detail=str(e))
