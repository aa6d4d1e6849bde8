# models/chat.py

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]

class ChatMessage(BaseModel):
	model_config = ConfigDict(frozen=True)

	role: Role
	content: str

class CompletionRequest(BaseModel):
	"""What gets sent upstream for one completion, never mutated after creation."""
	model_config = ConfigDict(frozen=True)

	messages: tuple[ChatMessage, ...] = Field(min_length=1)
	model: str

	def payload(self, temperature: float, max_tokens: int) -> dict:
		return {
			"model": self.model,
			"messages": [m.model_dump() for m in self.messages],
			"temperature": temperature,
			"max_tokens": max_tokens,
			"stream": False,
		}

class GuestChatRequest(BaseModel):
	message: str | None = None
	model: str | None = None
	history: list[ChatMessage] | None = None

class GuestChatResponse(BaseModel):
	response: str

class ChatCreateRequest(BaseModel):
	title: str | None = None

class ChatRenameRequest(BaseModel):
	title: str | None = None

class MessageRequest(BaseModel):
	message: str | None = None
	model: str | None = None
