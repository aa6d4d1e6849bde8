# services/completion.py

from collections.abc import Iterable, Mapping

import httpx

from relaychat.config.settings import Settings, settings
from relaychat.models.chat import ChatMessage, CompletionRequest
from relaychat.utils.logger import logger
from relaychat.utils.rotator import (APIKeyRotator, AuthorizationFailure,
                                     CompletionResult, CompletionSuccess,
                                     TransientFailure, UpstreamUnavailable)

AUTH_FAILURE_STATUSES = (401, 403)


def parse_completion(body) -> CompletionResult:
	"""Pulls choices[0].message.content out of a chat-completion response body."""
	try:
		content = body["choices"][0]["message"]["content"]
	except (KeyError, IndexError, TypeError):
		return TransientFailure("invalid response format")
	if not isinstance(content, str):
		return TransientFailure("invalid response format")
	return CompletionSuccess(content)


class CompletionDispatcher:
	"""
	Sends chat completions upstream, rotating through the key pool.

	Every attempt uses a fresh key from the rotator. Auth failures (401/403)
	blacklist the key, every other failure just moves on. After one attempt per
	key the caller gets a single UpstreamUnavailable with no upstream detail.
	"""
	def __init__(
		self,
		rotator: APIKeyRotator,
		*,
		config: Settings = settings,
		transport: httpx.AsyncBaseTransport | None = None
	):
		self.rotator = rotator
		self.url = config.UPSTREAM_BASE_URL
		self.models = list(config.MODELS)
		self.timeout = config.API_TIMEOUT
		self.temperature = config.TEMPERATURE
		self.max_tokens = config.MAX_TOKENS
		self._transport = transport

	@property
	def max_attempts(self) -> int:
		return len(self.rotator)

	def build_request(
		self,
		messages: Iterable[ChatMessage | Mapping[str, str]],
		model: str | None = None
	) -> CompletionRequest:
		items = tuple(m if isinstance(m, ChatMessage) else ChatMessage.model_validate(m) for m in messages)
		if not items:
			raise ValueError("At least one message is required")
		return CompletionRequest(messages=items, model=model or self.models[0])

	async def send(
		self,
		messages: Iterable[ChatMessage | Mapping[str, str]],
		model: str | None = None
	) -> str:
		"""Returns the completion text or raises UpstreamUnavailable."""
		request = self.build_request(messages, model)
		payload = request.payload(self.temperature, self.max_tokens)

		async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
			for attempt in range(self.max_attempts):
				key = self.rotator.select_key()
				logger(tag="upstream").info(f"Sending message with model: {request.model}, attempt: {attempt + 1}/{self.max_attempts}")
				result = await self._attempt(client, key, payload)

				if isinstance(result, CompletionSuccess):
					return result.text
				if isinstance(result, AuthorizationFailure):
					logger(tag="upstream").warning(f"Upstream rejected API key with HTTP {result.status} (attempt {attempt + 1}): {result.detail}")
					self.rotator.mark_failed(key)
				else:
					logger(tag="upstream").warning(f"Upstream call failed (attempt {attempt + 1}, status={result.status}): {result.reason}")

		logger(tag="upstream").error(f"Upstream unavailable after {self.max_attempts} attempts.")
		raise UpstreamUnavailable()

	async def _attempt(
		self,
		client: httpx.AsyncClient,
		key: str,
		payload: dict
	) -> CompletionResult:
		headers = {
			"Content-Type": "application/json",
			"Authorization": f"Bearer {key}"
		}
		try:
			r = await client.post(self.url, headers=headers, json=payload)
		except httpx.TimeoutException:
			return TransientFailure("timeout")
		except httpx.HTTPError as e:
			return TransientFailure(f"request error: {e}")

		if r.status_code in AUTH_FAILURE_STATUSES:
			return AuthorizationFailure(r.status_code, r.text[:200])
		if not r.is_success:
			return TransientFailure(f"HTTP {r.status_code}: {r.text[:200]}", r.status_code)
		try:
			body = r.json()
		except ValueError:
			return TransientFailure("response body is not JSON", r.status_code)
		return parse_completion(body)
