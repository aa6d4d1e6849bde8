# data/repositories/message.py

import uuid
from datetime import datetime, timezone
from typing import Any

from pymongo import ASCENDING, DESCENDING

from relaychat.data.repositories.base import get_collection

MESSAGES_COLLECTION = "messages"

def _serialise(doc: dict[str, Any]) -> dict[str, Any]:
	return {
		"id": doc["_id"],
		"chat_id": doc["chat_id"],
		"content": doc["content"],
		"role": doc["role"],
		"model": doc.get("model"),
		"created_at": doc["created_at"].isoformat()
	}

def add_message(
	chat_id: str,
	content: str,
	role: str,
	model: str | None = None,
	*,
	collection_name: str = MESSAGES_COLLECTION
) -> dict[str, Any]:
	"""Stores one message. Ownership is checked by the caller."""
	if role not in ("user", "assistant"):
		raise ValueError(f"Invalid message role: {role}")
	doc = {
		"_id": str(uuid.uuid4()),
		"chat_id": chat_id,
		"content": content,
		"role": role,
		"model": model,
		"created_at": datetime.now(timezone.utc)
	}
	get_collection(collection_name).insert_one(doc)
	return _serialise(doc)

def list_chat_messages(
	chat_id: str,
	/, *,
	collection_name: str = MESSAGES_COLLECTION
) -> list[dict[str, Any]]:
	"""All messages of a chat, oldest first."""
	cursor = get_collection(collection_name).find({"chat_id": chat_id}).sort("created_at", ASCENDING)
	return [_serialise(doc) for doc in cursor]

def recent_messages(
	chat_id: str,
	/,
	limit: int,
	*,
	collection_name: str = MESSAGES_COLLECTION
) -> list[dict[str, Any]]:
	"""The newest `limit` messages of a chat, returned oldest first."""
	cursor = get_collection(collection_name).find({"chat_id": chat_id}).sort("created_at", DESCENDING).limit(limit)
	return [_serialise(doc) for doc in cursor][::-1]

def message_stats(
	chat_ids: list[str],
	/, *,
	collection_name: str = MESSAGES_COLLECTION
) -> dict[str, dict[str, Any]]:
	"""Per chat message count and last message time."""
	if not chat_ids:
		return {}
	pipeline = [
		{"$match": {"chat_id": {"$in": chat_ids}}},
		{"$group": {
			"_id": "$chat_id",
			"message_count": {"$sum": 1},
			"last_message_at": {"$max": "$created_at"}
		}}
	]
	return {
		row["_id"]: {"message_count": row["message_count"], "last_message_at": row["last_message_at"]}
		for row in get_collection(collection_name).aggregate(pipeline)
	}

def delete_chat_messages(
	chat_id: str,
	/, *,
	collection_name: str = MESSAGES_COLLECTION
) -> int:
	result = get_collection(collection_name).delete_many({"chat_id": chat_id})
	return result.deleted_count
