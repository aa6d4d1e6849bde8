# main.py

import time
from contextlib import asynccontextmanager
from typing import Awaitable, Callable

from dotenv import load_dotenv
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from relaychat import __version__
from relaychat.utils.logger import logger, setup_logging

# Needs to be called before any logs are sent
setup_logging()

if load_dotenv():
	logger(tag="env").info("Environment variables loaded from .env file")

from relaychat.api.routes import auth as auth_route
from relaychat.api.routes import chats as chats_route
from relaychat.api.routes import guest as guest_route
from relaychat.api.routes import system as system_route
from relaychat.config.settings import settings
from relaychat.core.state import ChatState, get_state
from relaychat.data.repositories.base import close_connection
from relaychat.data.repositories.utils import ensure_indexes


def startup_event(state: ChatState):
	"""Initialize application on startup"""
	logger(tag="startup").info("Starting Relay Chat...")

	if state.keys_available == 0:
		logger(tag="startup").warning(f"No upstream API keys found! Set {settings.API_KEY_PREFIX}1, {settings.API_KEY_PREFIX}2, etc. environment variables.")
	else:
		logger(tag="startup").info(f"{state.keys_available} upstream API keys available")

	try:
		ensure_indexes()
	except Exception as e:
		# The app still serves guest chat without a database
		logger(tag="startup").error(f"Error initializing database: {e}")

	logger(tag="startup").info("Relay Chat startup complete")

def shutdown_event():
	"""Cleanup on shutdown"""
	logger(tag="shutdown").info("Shutting down Relay Chat...")
	close_connection()

@asynccontextmanager
async def lifespan(app: FastAPI):
	state = get_state()
	state.initialize(settings.reload())
	startup_event(state)
	yield
	shutdown_event()

app = FastAPI(
	lifespan=lifespan,
	title="Relay Chat",
	description="Chat backend with saved conversations and a guest mode backed by a rotating pool of API keys",
	version=__version__
)

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)

@app.middleware("http")
async def log_requests(
	request: Request,
	call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
	"""Log HTTP requests with their duration."""
	start_time = time.time()
	response = await call_next(request)
	process_time = time.time() - start_time
	response.headers["X-Process-Time"] = str(process_time)
	logger(tag="http").info(f"{request.method} {request.url.path} {response.status_code} ({process_time:.3f}s)")
	return response

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
	"""Anything the routes did not translate becomes an opaque 500."""
	logger(tag="http").error(f"Server error on {request.method} {request.url.path}: {exc}")
	return JSONResponse(status_code=500, content={"detail": "Internal server error"})

app.include_router(auth_route.router)
app.include_router(chats_route.router)
app.include_router(guest_route.router)
app.include_router(system_route.router)

@app.get("/api/info")
async def get_api_info():
	"""Get API information, lists all paths available in the api."""
	return {
		"name": "Relay Chat",
		"version": __version__,
		"features": [
			"User signup and login",
			"Saved chats and messages",
			"Guest chat without an account",
			"API key rotation with retry"
		],
		"endpoints": list(app.openapi()["paths"])
	}
