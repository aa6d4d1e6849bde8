"""Shared stubs for tests that must not touch MongoDB or the network."""

from relaychat.config.settings import Settings
from relaychat.core.state import ServiceNotConfigured
from relaychat.utils.rotator import UpstreamUnavailable


class FakeDispatcher:
	"""Records what would have been sent upstream and replies with a fixed text."""
	def __init__(self, reply: str = "Hi there", fail: bool = False):
		self.reply = reply
		self.fail = fail
		self.calls: list[tuple[list, str | None]] = []

	async def send(self, messages, model=None) -> str:
		self.calls.append((list(messages), model))
		if self.fail:
			raise UpstreamUnavailable()
		return self.reply


class StubState:
	"""Stands in for ChatState with a fake dispatcher (or none)."""
	def __init__(self, dispatcher: FakeDispatcher | None = None):
		self.settings = Settings()
		self.dispatcher = dispatcher
		self.keys_available = 3 if dispatcher else 0

	def require_dispatcher(self):
		if self.dispatcher is None:
			raise ServiceNotConfigured()
		return self.dispatcher
