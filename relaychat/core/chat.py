# core/chat.py

from typing import Any

from relaychat.core.state import ChatState
from relaychat.data.repositories import chat as chat_repo
from relaychat.data.repositories import message as message_repo
from relaychat.models.chat import ChatMessage
from relaychat.utils.logger import logger


class ChatNotFound(Exception):
	"""Raised when a chat does not exist or belongs to another user."""

	def __init__(self, message: str = "Chat not found or access denied"):
		super().__init__(message)

def get_owned_chat(chat_id: str, user_id: str) -> dict[str, Any]:
	chat = chat_repo.get_chat(chat_id, user_id)
	if not chat:
		raise ChatNotFound()
	return chat

def get_chat_messages(chat_id: str, user_id: str) -> list[dict[str, Any]]:
	get_owned_chat(chat_id, user_id)
	return message_repo.list_chat_messages(chat_id)

def add_message(
	chat_id: str,
	user_id: str,
	content: str,
	role: str,
	model: str | None = None
) -> dict[str, Any]:
	"""Stores a message in an owned chat and bumps the chat's updated_at."""
	get_owned_chat(chat_id, user_id)
	message = message_repo.add_message(chat_id, content, role, model)
	chat_repo.touch_chat(chat_id)
	return message

async def process_user_message(
	chat_id: str,
	user_id: str,
	text: str,
	model: str | None,
	state: ChatState
) -> dict[str, Any]:
	"""
	Saves the user's message, sends the recent history upstream and saves the
	reply. The user message stays stored even if the upstream call fails.
	"""
	dispatcher = state.require_dispatcher()
	model = model or state.settings.default_model
	add_message(chat_id, user_id, text, "user")

	history = message_repo.recent_messages(chat_id, state.settings.CHAT_HISTORY_LIMIT)
	api_messages = [ChatMessage(role=m["role"], content=m["content"]) for m in history]

	reply = await dispatcher.send(api_messages, model)
	logger(tag="chat").info(f"Chat {chat_id} got a {len(reply)} character reply from {model}")
	return add_message(chat_id, user_id, reply, "assistant", model)

async def guest_reply(
	message: str,
	history: list[ChatMessage] | None,
	model: str | None,
	state: ChatState
) -> str:
	"""Answers a guest without persisting anything."""
	dispatcher = state.require_dispatcher()
	limit = state.settings.GUEST_HISTORY_LIMIT
	recent = list(history or [])[-limit:] if limit else []
	api_messages = recent + [ChatMessage(role="user", content=message)]
	return await dispatcher.send(api_messages, model or state.settings.default_model)
