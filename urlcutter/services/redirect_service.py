"""
Redirect Service

This service decides where a short key redirects to.

Design Decisions:
- A redirect is only issued for stored targets starting with http
- Unknown keys, a missing collection and non-http targets all end in
  ShortKeyNotFoundError, which the endpoint turns into a 404
"""

import logging

from urlcutter.core.exceptions import ShortKeyNotFoundError
from urlcutter.core.validators import has_http_prefix
from urlcutter.services.url_service import URLShorteningService

logger = logging.getLogger(__name__)


class RedirectService:
    """Service for handling URL redirections."""

    def __init__(self, url_service: URLShorteningService):
        self.url_service = url_service

    async def get_redirect_url(self, key: str) -> str:
        """
        Get the target URL for redirection.

        Raises:
            ShortKeyNotFoundError: If there is nothing to redirect to
            StorageError: If the store fails
        """
        entry = await self.url_service.get_entry(key)
        if not has_http_prefix(entry.target_url):
            logger.warning(f"Refusing to redirect {key}: stored target lacks http prefix")
            raise ShortKeyNotFoundError(key)
        return entry.target_url
