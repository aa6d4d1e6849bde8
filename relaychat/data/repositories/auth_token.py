# data/repositories/auth_token.py

import secrets
from datetime import datetime, timedelta, timezone

from relaychat.data.repositories.base import get_collection

AUTH_TOKENS_COLLECTION = "auth_tokens"

def create_token(
	user_id: str,
	ttl: timedelta,
	*,
	collection_name: str = AUTH_TOKENS_COLLECTION
) -> str:
	"""Stores a new random bearer token for the user."""
	now = datetime.now(timezone.utc)
	token = secrets.token_urlsafe(32)
	get_collection(collection_name).insert_one({
		"_id": token,
		"user_id": user_id,
		"created_at": now,
		"expires_at": now + ttl
	})
	return token

def resolve_token(
	token: str,
	/, *,
	collection_name: str = AUTH_TOKENS_COLLECTION
) -> str | None:
	"""Returns the owning user id, or None for unknown or expired tokens."""
	doc = get_collection(collection_name).find_one({"_id": token})
	if not doc:
		return None
	# The TTL monitor only sweeps once a minute
	if doc["expires_at"] <= datetime.now(timezone.utc):
		return None
	return doc["user_id"]

def revoke_token(
	token: str,
	/, *,
	collection_name: str = AUTH_TOKENS_COLLECTION
) -> bool:
	return get_collection(collection_name).delete_one({"_id": token}).deleted_count > 0
