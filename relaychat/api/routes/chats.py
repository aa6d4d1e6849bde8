# api/routes/chats.py

from fastapi import APIRouter, Depends, HTTPException

from relaychat.core import chat as chat_core
from relaychat.core.auth import require_user
from relaychat.core.state import ChatState, ServiceNotConfigured, get_state
from relaychat.data.repositories import chat as chat_repo
from relaychat.models.chat import (ChatCreateRequest, ChatRenameRequest,
                                   MessageRequest)
from relaychat.utils.logger import logger
from relaychat.utils.rotator import UpstreamUnavailable

router = APIRouter(prefix="/api/chats", tags=["Chats"])

@router.post("")
async def create_chat(
	req: ChatCreateRequest,
	user: dict = Depends(require_user),
	state: ChatState = Depends(get_state)
):
	title = (req.title or "").strip() or state.settings.DEFAULT_CHAT_TITLE
	try:
		return chat_repo.create_chat(user["id"], title)
	except Exception as e:
		logger().error(f"Create chat error: {e}")
		raise HTTPException(status_code=500, detail="Failed to create chat")

@router.get("")
async def list_chats(user: dict = Depends(require_user)):
	try:
		return chat_repo.get_user_chats(user["id"])
	except Exception as e:
		logger().error(f"Fetch chats error: {e}")
		raise HTTPException(status_code=500, detail="Failed to fetch chats")

@router.get("/{chat_id}/messages")
async def list_messages(chat_id: str, user: dict = Depends(require_user)):
	try:
		return chat_core.get_chat_messages(chat_id, user["id"])
	except chat_core.ChatNotFound as e:
		raise HTTPException(status_code=404, detail=str(e))
	except Exception as e:
		logger().error(f"Fetch messages error: {e}")
		raise HTTPException(status_code=500, detail="Failed to fetch messages")

@router.post("/{chat_id}/messages")
async def send_message(
	chat_id: str,
	req: MessageRequest,
	user: dict = Depends(require_user),
	state: ChatState = Depends(get_state)
):
	"""Store the user's message and return the assistant's reply."""
	if not req.message or not req.message.strip():
		raise HTTPException(status_code=400, detail="Message is required")
	try:
		logger().info(f"POST /api/chats/{chat_id}/messages user={user['id']} model={req.model}")
		return await chat_core.process_user_message(chat_id, user["id"], req.message, req.model, state)
	except chat_core.ChatNotFound as e:
		raise HTTPException(status_code=404, detail=str(e))
	except ServiceNotConfigured as e:
		raise HTTPException(status_code=503, detail=str(e))
	except UpstreamUnavailable as e:
		raise HTTPException(status_code=502, detail=str(e))
	except Exception as e:
		logger().error(f"Send message error: {e}")
		raise HTTPException(status_code=500, detail="Failed to send message")

@router.patch("/{chat_id}")
async def rename_chat(
	chat_id: str,
	req: ChatRenameRequest,
	user: dict = Depends(require_user)
):
	title = (req.title or "").strip()
	if not title:
		raise HTTPException(status_code=400, detail="Title is required")
	chat = chat_repo.update_chat_title(chat_id, user["id"], title)
	if not chat:
		raise HTTPException(status_code=404, detail=str(chat_core.ChatNotFound()))
	return chat

@router.delete("/{chat_id}")
async def delete_chat(chat_id: str, user: dict = Depends(require_user)):
	if not chat_repo.delete_chat(chat_id, user["id"]):
		raise HTTPException(status_code=404, detail=str(chat_core.ChatNotFound()))
	return {"success": True}
