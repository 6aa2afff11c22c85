"""
Services module for business logic separation.

This module contains service classes that encapsulate business logic,
keeping it separate from API endpoints and the store.
"""

from urlcutter.services.redirect_service import RedirectService
from urlcutter.services.url_service import URLShorteningService

__all__ = ["RedirectService", "URLShorteningService"]
