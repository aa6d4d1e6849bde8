# data/repositories/chat.py

import uuid
from datetime import datetime, timezone
from typing import Any

from pymongo import DESCENDING, ReturnDocument

from relaychat.data.repositories import message as message_repo
from relaychat.data.repositories.base import get_collection

CHATS_COLLECTION = "chats"

def _serialise(doc: dict[str, Any]) -> dict[str, Any]:
	return {
		"id": doc["_id"],
		"user_id": doc["user_id"],
		"title": doc["title"],
		"created_at": doc["created_at"].isoformat(),
		"updated_at": doc["updated_at"].isoformat()
	}

def create_chat(
	user_id: str,
	title: str,
	*,
	collection_name: str = CHATS_COLLECTION
) -> dict[str, Any]:
	now = datetime.now(timezone.utc)
	doc = {
		"_id": str(uuid.uuid4()),
		"user_id": user_id,
		"title": title,
		"created_at": now,
		"updated_at": now
	}
	get_collection(collection_name).insert_one(doc)
	return _serialise(doc)

def get_chat(
	chat_id: str,
	user_id: str,
	*,
	collection_name: str = CHATS_COLLECTION
) -> dict[str, Any] | None:
	"""Returns the chat only if it belongs to the user."""
	doc = get_collection(collection_name).find_one({"_id": chat_id, "user_id": user_id})
	return _serialise(doc) if doc else None

def get_user_chats(
	user_id: str,
	/, *,
	collection_name: str = CHATS_COLLECTION
) -> list[dict[str, Any]]:
	"""Chats of a user, most recently updated first, with message counts."""
	chats = [
		_serialise(doc)
		for doc in get_collection(collection_name).find({"user_id": user_id}).sort("updated_at", DESCENDING)
	]
	stats = message_repo.message_stats([c["id"] for c in chats])
	for chat in chats:
		entry = stats.get(chat["id"], {})
		last = entry.get("last_message_at")
		chat["message_count"] = entry.get("message_count", 0)
		chat["last_message_at"] = last.isoformat() if last else None
	return chats

def update_chat_title(
	chat_id: str,
	user_id: str,
	title: str,
	*,
	collection_name: str = CHATS_COLLECTION
) -> dict[str, Any] | None:
	doc = get_collection(collection_name).find_one_and_update(
		{"_id": chat_id, "user_id": user_id},
		{"$set": {"title": title, "updated_at": datetime.now(timezone.utc)}},
		return_document=ReturnDocument.AFTER
	)
	return _serialise(doc) if doc else None

def touch_chat(
	chat_id: str,
	/, *,
	collection_name: str = CHATS_COLLECTION
) -> None:
	get_collection(collection_name).update_one(
		{"_id": chat_id},
		{"$set": {"updated_at": datetime.now(timezone.utc)}}
	)

def delete_chat(
	chat_id: str,
	user_id: str,
	*,
	collection_name: str = CHATS_COLLECTION
) -> dict[str, Any] | None:
	"""Deletes an owned chat together with its messages."""
	doc = get_collection(collection_name).find_one_and_delete({"_id": chat_id, "user_id": user_id})
	if not doc:
		return None
	message_repo.delete_chat_messages(chat_id)
	return _serialise(doc)
