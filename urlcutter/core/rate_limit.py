"""
Rate Limiting Configuration

This module provides rate limiting for the create and redirect endpoints.

Design Decisions:
- Uses slowapi for rate limiting (lightweight, FastAPI-compatible)
- IP-based limiting
- Limits are read from settings on every request, so tests and operators
  can change them without re-decorating endpoints
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from urlcutter.core.setting import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


def create_limit() -> str:
    return settings.RATE_LIMIT_CREATE


def resolve_limit() -> str:
    return settings.RATE_LIMIT_RESOLVE
