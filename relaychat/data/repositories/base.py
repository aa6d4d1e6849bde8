# data/repositories/base.py

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from relaychat.config.settings import settings
from relaychat.utils.logger import logger

_mongo_client: MongoClient | None = None

def get_database(db_name: str | None = None) -> Database:
	"""Gets the database instance, managing a single connection."""
	global _mongo_client
	if _mongo_client is None:
		try:
			logger().info("Initializing MongoDB connection.")
			_mongo_client = MongoClient(settings.MONGO_URI, tz_aware=True)
		except Exception as e:
			logger().error(f"Failed to connect to MongoDB: {e}")
			raise
	return _mongo_client[db_name or settings.MONGO_DB]

def close_connection():
	"""Closes the MongoDB connection."""
	global _mongo_client
	if _mongo_client:
		logger().info("Closing MongoDB connection.")
		_mongo_client.close()
		_mongo_client = None

def get_collection(name: str) -> Collection:
	"""Retrieves a MongoDB collection by name. Mongo creates it on first write."""
	return get_database().get_collection(name)
