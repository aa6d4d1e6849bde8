# utils/rotator.py

import threading
from collections.abc import Iterable
from dataclasses import dataclass

from relaychat.utils.logger import logger


@dataclass(frozen=True)
class CompletionSuccess:
	text: str

@dataclass(frozen=True)
class AuthorizationFailure:
	"""Upstream rejected the key (401/403). The key gets blacklisted."""
	status: int
	detail: str = ""

@dataclass(frozen=True)
class TransientFailure:
	"""Timeout, network error, non-auth error status or malformed body."""
	reason: str
	status: int | None = None

CompletionResult = CompletionSuccess | AuthorizationFailure | TransientFailure


class UpstreamUnavailable(Exception):
	"""Raised once every key in the pool has been tried without success."""

	def __init__(self, message: str = "Unable to get response from AI service. Please try again later."):
		super().__init__(message)


class APIKeyRotator:
	"""
	Round-robin API key rotator with a blacklist of failed keys.
	- keys are fixed at construction, order is preserved
	- select_key() returns the next key not marked failed
	- mark_failed() blacklists a key after an authorization error
	- once every key is blacklisted the whole blacklist is cleared
	All cursor/blacklist access goes through one lock, nothing inside it waits on I/O.
	"""
	def __init__(self, keys: Iterable[str]):
		self.keys: tuple[str, ...] = tuple(k for k in keys if k)
		if not self.keys:
			raise ValueError("APIKeyRotator needs at least one API key")
		self._cursor = 0
		self._failed: set[str] = set()
		self._lock = threading.Lock()
		logger().info(f"Loaded {len(self.keys)} API keys.")

	def __len__(self) -> int:
		return len(self.keys)

	@property
	def cursor(self) -> int:
		return self._cursor

	@property
	def failed_keys(self) -> frozenset[str]:
		with self._lock:
			return frozenset(self._failed)

	def select_key(self) -> str:
		"""Returns the next usable key, advancing the cursor past every key examined."""
		with self._lock:
			size = len(self.keys)
			was_exhausted = len(self._failed) >= size
			if was_exhausted:
				self._failed.clear()

			selected = None
			for _ in range(size):
				key = self.keys[self._cursor]
				self._cursor = (self._cursor + 1) % size
				if key not in self._failed:
					selected = key
					break

			if selected is None:
				# Only reachable if keys were marked failed between the reset and the scan
				self._failed.clear()
				selected = self.keys[0]

		if was_exhausted:
			logger(tag="rotation").info("All API keys marked failed, resetting blacklist.")
		return selected

	def mark_failed(self, key: str) -> None:
		"""Blacklists a key until the next full reset."""
		if key not in self.keys:
			return
		with self._lock:
			self._failed.add(key)
			remaining = len(self.keys) - len(self._failed)
		logger(tag="rotation").warning(f"API key #{self.keys.index(key) + 1} marked as failed ({remaining} remaining).")

	def reset(self) -> None:
		with self._lock:
			self._failed.clear()
			self._cursor = 0
