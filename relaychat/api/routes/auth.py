# api/routes/auth.py

from fastapi import APIRouter, Depends, HTTPException

from relaychat.config.settings import settings
from relaychat.core import auth
from relaychat.data.repositories import auth_token as token_repo
from relaychat.data.repositories.account import UsernameTaken
from relaychat.models.user import AuthResponse, CredentialsRequest
from relaychat.utils.logger import logger

router = APIRouter(prefix="/api", tags=["Auth"])

def _require_credentials(req: CredentialsRequest) -> tuple[str, str]:
	username = (req.username or "").strip()
	if not username or not req.password:
		raise HTTPException(status_code=400, detail="Username and password are required")
	return username, req.password

@router.post("/signup", response_model=AuthResponse)
async def signup(req: CredentialsRequest):
	username, password = _require_credentials(req)
	if len(password) < settings.MIN_PASSWORD_LENGTH:
		raise HTTPException(status_code=400, detail=f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")
	try:
		logger().info(f"POST /api/signup username={username}")
		user = auth.create_user(username, password)
		return {"user": user, "token": auth.issue_token(user)}
	except UsernameTaken as e:
		raise HTTPException(status_code=409, detail=str(e))
	except Exception as e:
		logger().error(f"Signup error: {e}")
		raise HTTPException(status_code=500, detail="Failed to create user")

@router.post("/login", response_model=AuthResponse)
async def login(req: CredentialsRequest):
	username, password = _require_credentials(req)
	try:
		user = auth.authenticate_user(username, password)
		return {"user": user, "token": auth.issue_token(user)}
	except auth.InvalidCredentials as e:
		logger().info(f"Failed login for username={username}")
		raise HTTPException(status_code=401, detail=str(e))
	except Exception as e:
		logger().error(f"Login error: {e}")
		raise HTTPException(status_code=500, detail="Failed to log in")

@router.post("/logout")
async def logout(user: dict = Depends(auth.require_user)):
	token_repo.revoke_token(user["token"])
	return {"success": True}
