# config/settings.py

import os

DEFAULT_MODELS = [
	"sonar(clinesp)",
	"groq/moonshotai/kimi-k2-instruct",
	"sonar-reasoning-pro(clinesp)",
	"sonar-reasoning(clinesp)",
]

def _int_env(name: str, default: int) -> int:
	value = os.getenv(name)
	return int(value) if value else default

def load_api_keys(prefix: str, max_slots: int) -> list[str]:
	"""Collects keys from numbered env vars, e.g. UPSTREAM_API_1..UPSTREAM_API_10."""
	keys = []
	for i in range(1, max_slots + 1):
		value = os.getenv(f"{prefix}{i}")
		if value and value.strip():
			keys.append(value.strip())
	return keys

class Settings:
	# Upstream completion service
	API_KEY_PREFIX: str = "UPSTREAM_API_"
	MAX_KEY_SLOTS: int = 10
	UPSTREAM_API_KEYS: list[str] = []
	UPSTREAM_BASE_URL: str = "https://samuraiapi.in/v1/chat/completions"
	MODELS: list[str] = DEFAULT_MODELS
	API_TIMEOUT: float = 30
	TEMPERATURE: float = 0.7
	MAX_TOKENS: int = 2048

	# Chat settings
	DEFAULT_CHAT_TITLE: str = "New Chat"
	CHAT_HISTORY_LIMIT: int = 20
	GUEST_HISTORY_LIMIT: int = 10

	# Accounts
	MIN_PASSWORD_LENGTH: int = 6
	TOKEN_TTL_DAYS: int = 7

	# Database
	MONGO_URI: str = "mongodb://127.0.0.1:27017/"
	MONGO_DB: str = "relaychat"

	def reload(self) -> "Settings":
		"""Re-reads the environment. Called once .env has been loaded."""
		self.MAX_KEY_SLOTS = _int_env("MAX_KEY_SLOTS", Settings.MAX_KEY_SLOTS)
		self.UPSTREAM_API_KEYS = load_api_keys(self.API_KEY_PREFIX, self.MAX_KEY_SLOTS)
		self.UPSTREAM_BASE_URL = os.getenv("UPSTREAM_BASE_URL", Settings.UPSTREAM_BASE_URL)
		models = [m.strip() for m in os.getenv("UPSTREAM_MODELS", "").split(",") if m.strip()]
		self.MODELS = models or list(DEFAULT_MODELS)
		self.API_TIMEOUT = float(os.getenv("API_TIMEOUT") or Settings.API_TIMEOUT)
		self.TOKEN_TTL_DAYS = _int_env("TOKEN_TTL_DAYS", Settings.TOKEN_TTL_DAYS)
		self.MONGO_URI = os.getenv("MONGO_URI", Settings.MONGO_URI)
		self.MONGO_DB = os.getenv("MONGO_DB", Settings.MONGO_DB)
		return self

	@property
	def default_model(self) -> str:
		return self.MODELS[0]

# Create singleton instance
settings = Settings().reload()
