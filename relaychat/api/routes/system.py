# api/routes/system.py

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from relaychat.core.state import ChatState, get_state

router = APIRouter(prefix="/api", tags=["System"])

@router.get("/models")
async def list_models(state: ChatState = Depends(get_state)):
	"""Model identifiers offered to clients. Not enforced on requests."""
	return {"models": state.settings.MODELS}

@router.get("/health")
async def health_check(state: ChatState = Depends(get_state)):
	"""Health check endpoint"""
	return {
		"status": "OK",
		"timestamp": datetime.now(timezone.utc).isoformat(),
		"keys_available": state.keys_available
	}
