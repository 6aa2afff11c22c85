"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs:
target URLs on create and short keys on resolve.

Security Considerations:
- Short keys are restricted to the base58 alphabet before they reach the store
- Length limits prevent DoS attacks
"""

from typing import Optional

from urlcutter.core.key_codec import BASE58_INDEX

# Longest key the store can issue for a 64-bit counter is 11 characters.
MAX_SHORT_KEY_LENGTH = 20

URL_SCHEME_PREFIX = "http"


def sanitize_short_key(key: str) -> Optional[str]:
    """
    Sanitize and validate short key format.

    Short keys should only contain base58 characters, the same set the
    codec uses for encoding.

    Args:
        key: The short key to sanitize

    Returns:
        Sanitized short key if valid, None otherwise
    """
    if not key or not isinstance(key, str):
        return None

    if len(key) > MAX_SHORT_KEY_LENGTH:
        return None

    if any(char not in BASE58_INDEX for char in key):
        return None

    return key


def validate_url_length(url: str, max_length: int = 2048) -> bool:
    """
    Validate URL length to prevent DoS attacks.

    Args:
        url: The URL to validate
        max_length: Maximum allowed length (default: 2048 per RFC 7230)

    Returns:
        True if URL length is valid, False otherwise
    """
    return bool(url) and len(url) <= max_length


def has_http_prefix(url: Optional[str]) -> bool:
    """True when url starts with the http scheme prefix (covers https too)."""
    return isinstance(url, str) and url.startswith(URL_SCHEME_PREFIX)
