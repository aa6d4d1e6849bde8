# core/state.py

from relaychat.config.settings import Settings, settings
from relaychat.services.completion import CompletionDispatcher
from relaychat.utils.logger import logger
from relaychat.utils.rotator import APIKeyRotator


class ServiceNotConfigured(Exception):
	"""Raised when a completion is requested but no API keys are configured."""

	def __init__(self, message: str = "AI service is not configured"):
		super().__init__(message)


class ChatState:
	"""Manages the global state of the application using a Singleton pattern."""
	_instance = None

	def __new__(cls):
		if cls._instance is None:
			cls._instance = super(ChatState, cls).__new__(cls)
			cls._instance._initialized = False
		return cls._instance

	def __init__(self):
		if self._initialized:
			return
		self.settings: Settings = settings
		self.rotator: APIKeyRotator | None = None
		self.dispatcher: CompletionDispatcher | None = None
		self._initialized = True

	def initialize(self, config: Settings | None = None):
		"""Builds the key pool and dispatcher from the current settings."""
		self.settings = config or settings
		if not self.settings.UPSTREAM_API_KEYS:
			logger().warning(f"No API keys found for prefix '{self.settings.API_KEY_PREFIX}'.")
			self.rotator = None
			self.dispatcher = None
			return
		self.rotator = APIKeyRotator(self.settings.UPSTREAM_API_KEYS)
		self.dispatcher = CompletionDispatcher(self.rotator, config=self.settings)

	def require_dispatcher(self) -> CompletionDispatcher:
		if self.dispatcher is None:
			raise ServiceNotConfigured()
		return self.dispatcher

	@property
	def keys_available(self) -> int:
		return len(self.rotator) if self.rotator else 0

def get_state() -> ChatState:
	"""Provides access to the application state, for use as a dependency."""
	return ChatState()
