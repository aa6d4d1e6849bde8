# utils/logger.py

import logging
import os
import sys

_DEFAULT_FORMAT = "%(asctime)s — %(levelname)s  \t[%(name)s%(tag)s]  \t%(message)s"
_DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every request or heartbeat at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "pymongo")

class TaggedFormatter(logging.Formatter):
	"""
	Formatter that fills in an empty 'tag' for records that were not emitted
	through a tagged adapter (uvicorn, pymongo...).
	"""
	def __init__(
		self,
		fmt=_DEFAULT_FORMAT,
		datefmt=_DEFAULT_DATE_FORMAT,
		**kwargs
	):
		super().__init__(fmt, datefmt, **kwargs)

	def format(self, record: logging.LogRecord) -> str:
		if not hasattr(record, "tag"):
			record.tag = ""
		return super().format(record)

def resolve_level(value: str | int | None, default: int = logging.INFO) -> int:
	"""Accepts a level name ("debug", "WARNING") or number, e.g. from LOG_LEVEL."""
	if value is None or value == "":
		return default
	if isinstance(value, int):
		return value
	if value.isdigit():
		return int(value)
	level = logging.getLevelName(value.strip().upper())
	return level if isinstance(level, int) else default

def setup_logging(
	level: int | None = None,
	stream=sys.stdout
) -> None:
	"""
	Configures the root logger for the application.

	Call once at startup, before anything logs. Repeated calls are no-ops so
	test modules can import the app freely.

	Args:
		level: Minimum level to output. Defaults to $LOG_LEVEL, then INFO.
		stream: Where log lines are written.
	"""
	root_logger = logging.getLogger()
	if root_logger.handlers:
		return

	handler = logging.StreamHandler(stream=stream)
	handler.setFormatter(TaggedFormatter())
	root_logger.addHandler(handler)
	root_logger.setLevel(level if level is not None else resolve_level(os.getenv("LOG_LEVEL")))
	# Our own attempt logs already say which upstream call happened
	for name in _NOISY_LOGGERS:
		logging.getLogger(name).setLevel(logging.WARNING)
	root_logger.info("Logger set up")

def logger(
	tag: str | None = None,
	*,
	name: str | None = None
) -> logging.LoggerAdapter:
	"""
	Returns a logger that injects a tag into each record.

	If 'name' is not provided it defaults to the calling module's name.

	Example:
	```
		# In relaychat/core/auth.py
		logger(tag="signup").info("Created user")
		# 2026-10-17 22:15:30 — INFO  	[relaychat.core.auth:signup]  	Created user
	```
	"""
	if name is None:
		# Only the caller's globals are needed, not the full stack with source lines
		name = sys._getframe(1).f_globals.get("__name__", "unknown_module")
	return logging.LoggerAdapter(
		logging.getLogger(name),
		{"tag": f":{tag}" if tag is not None else ""}
	)
