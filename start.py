#!/usr/bin/env python3
"""
Relay Chat - Startup Script
Checks the environment and starts the API server with uvicorn.
"""

import os

import uvicorn
from dotenv import load_dotenv

from relaychat.config.settings import settings


def main():
	"""Start Relay Chat"""
	load_dotenv()
	settings.reload()
	print("Relay Chat")
	print("=" * 50)

	if not settings.UPSTREAM_API_KEYS:
		print(f"Warning: no upstream API keys found! Set {settings.API_KEY_PREFIX}1, {settings.API_KEY_PREFIX}2, etc.")
		print("Accounts and saved chats work, completions will answer 503.")
	else:
		print(f"Found {len(settings.UPSTREAM_API_KEYS)} upstream API keys")

	if not os.getenv("MONGO_URI"):
		print(f"MONGO_URI not set, using {settings.MONGO_URI}")

	port = int(os.getenv("PORT", "3001"))
	print(f"\nAPI documentation at: http://localhost:{port}/docs")
	print("Press Ctrl+C to stop the server")
	print("=" * 50)

	uvicorn.run(
		"relaychat.main:app",
		host="0.0.0.0",
		port=port,
		log_level="info",
		reload=os.getenv("RELOAD", "").lower() in ("1", "true")
	)

if __name__ == "__main__":
	main()
