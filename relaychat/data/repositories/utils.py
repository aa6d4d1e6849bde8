# data/repositories/utils.py

from pymongo import ASCENDING

from relaychat.data.repositories.account import USERS_COLLECTION
from relaychat.data.repositories.auth_token import AUTH_TOKENS_COLLECTION
from relaychat.data.repositories.base import get_collection
from relaychat.data.repositories.chat import CHATS_COLLECTION
from relaychat.data.repositories.message import MESSAGES_COLLECTION
from relaychat.utils.logger import logger


def create_index(
	collection_name: str,
	field_name: str,
	*,
	unique: bool = False,
	**kwargs
) -> None:
	"""Creates an index on a specified collection."""
	collection = get_collection(collection_name)
	collection.create_index([(field_name, ASCENDING)], unique=unique, **kwargs)

def ensure_indexes() -> None:
	"""Creates every index the app relies on. Safe to call on each startup."""
	create_index(USERS_COLLECTION, "username_lower", unique=True)
	create_index(CHATS_COLLECTION, "user_id")
	create_index(MESSAGES_COLLECTION, "chat_id")
	create_index(AUTH_TOKENS_COLLECTION, "expires_at", expireAfterSeconds=0)
	logger(tag="indexes").info("Database indexes initialized.")
