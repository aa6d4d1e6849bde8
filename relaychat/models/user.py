# models/user.py

from pydantic import BaseModel


class CredentialsRequest(BaseModel):
	username: str | None = None
	password: str | None = None

class UserOut(BaseModel):
	id: str
	username: str

class AuthResponse(BaseModel):
	user: UserOut
	token: str
