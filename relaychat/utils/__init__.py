# ────────────────────────────── utils/__init__.py ──────────────────────────────
"""
Relay Chat - Utility Package

This package provides:
- API key rotation with a blacklist for failed keys
- Tagged logging utilities
"""

from .logger import logger, setup_logging
from .rotator import APIKeyRotator, UpstreamUnavailable

__all__ = [
	'APIKeyRotator',
	'UpstreamUnavailable',
	'logger',
	'setup_logging'
]
