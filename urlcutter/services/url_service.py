"""
URL Shortening Service

This service handles the core business logic for URL shortening:
- Validating target URLs before anything touches the store
- Issuing short keys through the sequence-keyed store
- Looking entries up by short key

Design Decisions:
- Counter-based: every key is the base58 form of the store's counter,
  so keys are unique without a retry loop or a uniqueness check
- The same URL shortened twice gets two keys; entries are append-only
- Validation happens first, so a rejected URL never advances the counter
"""

import logging

from urlcutter.core.exceptions import InvalidURLError
from urlcutter.core.validators import has_http_prefix, validate_url_length
from urlcutter.db.models import EntryRecord
from urlcutter.db.store import SequenceKeyedStore

logger = logging.getLogger(__name__)


class URLShorteningService:
    """
    Core business logic for URL shortening.

    Separated from API layer for testability and maintainability.
    """

    def __init__(self, store: SequenceKeyedStore, max_url_length: int = 2048):
        """
        Initialize the URL shortening service.

        Args:
            store: Open store shared by the whole process
            max_url_length: Longest target URL accepted
        """
        self.store = store
        self.max_url_length = max_url_length

    def validate_target_url(self, target_url: str) -> str:
        """
        Raises:
            InvalidURLError: If the URL is missing, too long or lacks the http prefix
        """
        if not target_url:
            raise InvalidURLError("", reason="Missing URL")
        if not has_http_prefix(target_url):
            raise InvalidURLError(target_url, reason="URL must start with http")
        if not validate_url_length(target_url, self.max_url_length):
            raise InvalidURLError(
                target_url[:64],
                reason=f"URL longer than {self.max_url_length} characters"
            )
        return target_url

    async def create_short_url(self, target_url: str) -> str:
        """
        Shorten target_url.

        Returns:
            The issued short key

        Raises:
            InvalidURLError: If URL validation fails
            StorageError: If the store fails
            EncodeError: If the counter cannot be encoded
        """
        self.validate_target_url(target_url)
        key = await self.store.insert(target_url)
        logger.info(f"Shortened {target_url} -> {key}")
        return key

    async def get_entry(self, key: str) -> EntryRecord:
        """
        Retrieve the entry for a given short key.

        Raises:
            ShortKeyNotFoundError: If the key was never issued
            StorageError: If the store fails
        """
        return await self.store.lookup(key)
