# data/repositories/account.py

import uuid
from datetime import datetime, timezone
from typing import Any

from pymongo.errors import DuplicateKeyError

from relaychat.data.repositories.base import get_collection
from relaychat.utils.logger import logger

USERS_COLLECTION = "users"

class UsernameTaken(Exception):
	"""Raised when signing up with a username that already exists (any casing)."""

	def __init__(self, message: str = "Username already exists"):
		super().__init__(message)

def create_account(
	username: str,
	password_hash: str,
	*,
	collection_name: str = USERS_COLLECTION
) -> dict[str, Any]:
	"""Creates a new user account. Returns the public fields of the account."""
	collection = get_collection(collection_name)
	if collection.find_one({"username_lower": username.lower()}, {"_id": 1}):
		raise UsernameTaken()

	doc = {
		"_id": str(uuid.uuid4()),
		"username": username,
		"username_lower": username.lower(),
		"password_hash": password_hash,
		"created_at": datetime.now(timezone.utc)
	}
	try:
		collection.insert_one(doc)
	except DuplicateKeyError as e:
		# Lost a race with a concurrent signup for the same name
		logger().warning(f"Duplicate username on insert: {e}")
		raise UsernameTaken() from e
	logger().info(f"Created new account: {doc['_id']}")
	return {"id": doc["_id"], "username": username}

def get_account_by_username(
	username: str,
	/, *,
	collection_name: str = USERS_COLLECTION
) -> dict[str, Any] | None:
	"""Case-insensitive lookup, includes the password hash."""
	return get_collection(collection_name).find_one({"username_lower": username.lower()})

def get_account(
	user_id: str,
	/, *,
	collection_name: str = USERS_COLLECTION
) -> dict[str, Any] | None:
	return get_collection(collection_name).find_one({"_id": user_id}, {"password_hash": 0})
