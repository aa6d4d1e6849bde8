# core/auth.py
"""
Account creation, password checks and bearer tokens.

Passwords are stored as `scrypt$<salt hex>$<hash hex>`. Tokens are opaque
random strings kept in the `auth_tokens` collection with an expiry.
"""

import hashlib
import hmac
import os
from datetime import timedelta

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from relaychat.config.settings import settings
from relaychat.data.repositories import account as account_repo
from relaychat.data.repositories import auth_token as token_repo
from relaychat.utils.logger import logger

_SCRYPT_N = 2 ** 14
_SCRYPT_R = 8
_SCRYPT_P = 1

class InvalidCredentials(Exception):
	"""Raised on unknown username or wrong password."""

	def __init__(self, message: str = "Invalid credentials"):
		super().__init__(message)

def hash_password(password: str) -> str:
	salt = os.urandom(16)
	digest = hashlib.scrypt(password.encode("utf-8"), salt=salt, n=_SCRYPT_N, r=_SCRYPT_R, p=_SCRYPT_P)
	return f"scrypt${salt.hex()}${digest.hex()}"

def verify_password(password: str, stored: str) -> bool:
	try:
		scheme, salt_hex, digest_hex = stored.split("$")
		salt = bytes.fromhex(salt_hex)
		expected = bytes.fromhex(digest_hex)
	except ValueError:
		return False
	if scheme != "scrypt":
		return False
	digest = hashlib.scrypt(password.encode("utf-8"), salt=salt, n=_SCRYPT_N, r=_SCRYPT_R, p=_SCRYPT_P)
	return hmac.compare_digest(digest, expected)

def create_user(username: str, password: str) -> dict[str, str]:
	"""Creates an account. Raises account_repo.UsernameTaken on duplicates."""
	user = account_repo.create_account(username.strip(), hash_password(password))
	logger(tag="signup").info(f"Created user {user['username']}")
	return user

def authenticate_user(username: str, password: str) -> dict[str, str]:
	account = account_repo.get_account_by_username(username.strip())
	if not account or not verify_password(password, account["password_hash"]):
		raise InvalidCredentials()
	return {"id": account["_id"], "username": account["username"]}

def issue_token(user: dict[str, str]) -> str:
	return token_repo.create_token(user["id"], timedelta(days=settings.TOKEN_TTL_DAYS))

_bearer = HTTPBearer(auto_error=False)

def require_user(
	credentials: HTTPAuthorizationCredentials | None = Depends(_bearer)
) -> dict[str, str]:
	"""FastAPI dependency resolving the bearer token to `{id, username}`."""
	if credentials is None or not credentials.credentials:
		raise HTTPException(status_code=401, detail="No token provided")

	user_id = token_repo.resolve_token(credentials.credentials)
	account = account_repo.get_account(user_id) if user_id else None
	if not account:
		logger(tag="auth").info("Rejected unknown or expired token")
		raise HTTPException(status_code=401, detail="Invalid token")
	return {"id": account["_id"], "username": account["username"], "token": credentials.credentials}
