"""
FastAPI dependencies.

The store is opened once by the application lifespan and kept on
app.state; endpoints receive it (and the services built on it) here.
"""

from fastapi import Depends, Request

from urlcutter.core.setting import Settings
from urlcutter.db.store import SequenceKeyedStore
from urlcutter.services.redirect_service import RedirectService
from urlcutter.services.url_service import URLShorteningService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> SequenceKeyedStore:
    return request.app.state.store


def get_url_service(
    store: SequenceKeyedStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> URLShorteningService:
    return URLShorteningService(store, max_url_length=settings.MAX_URL_LENGTH)


def get_redirect_service(
    url_service: URLShorteningService = Depends(get_url_service),
) -> RedirectService:
    return RedirectService(url_service)
