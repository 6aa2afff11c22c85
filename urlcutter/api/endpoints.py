"""
FastAPI Endpoints for URL Cutter Service

This module defines the HTTP endpoints with minimal logic.
Endpoints only handle:
- Reading the request (form field, JSON body, path segment)
- Rate limiting
- Translating service exceptions into HTTP status codes

All business logic is in services; the store comes from the lifespan
through FastAPI dependencies.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse

from urlcutter.api.deps import get_redirect_service, get_settings, get_url_service
from urlcutter.api.schemas import ShortenRequest, ShortenResponse
from urlcutter.core.exceptions import (
    EncodeError,
    InvalidURLError,
    ShortKeyNotFoundError,
    StorageError,
)
from urlcutter.core.rate_limit import create_limit, limiter, resolve_limit
from urlcutter.core.setting import Settings
from urlcutter.core.validators import sanitize_short_key
from urlcutter.services.redirect_service import RedirectService
from urlcutter.services.url_service import URLShorteningService

logger = logging.getLogger(__name__)

# Form field carrying the target URL on POST /create
POST_FORM_KEY = "url"

router = APIRouter()


async def _create(url_service: URLShorteningService, target_url: Optional[str]) -> str:
    try:
        return await url_service.create_short_url(target_url)
    except InvalidURLError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Incorrect input: {e.reason}"
        )
    except (StorageError, EncodeError) as e:
        logger.error(f"Failed to create short URL: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )


@router.post(
    "/create",
    response_class=PlainTextResponse,
    summary="Create a short key (form)",
    description="Takes the form field 'url' and answers with the short key as plain text"
)
@limiter.limit(create_limit)
async def create_from_form(
    request: Request,  # Required for rate limiting (slowapi expects parameter named 'request')
    url: Optional[str] = Form(default=None, alias=POST_FORM_KEY),
    url_service: URLShorteningService = Depends(get_url_service),
) -> PlainTextResponse:
    key = await _create(url_service, url)
    return PlainTextResponse(key)


@router.get("/create", include_in_schema=False)
async def create_wrong_method() -> None:
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Only POST method allowed"
    )


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short key (JSON)",
    description="Takes a long URL and returns its short key and short URL"
)
@limiter.limit(create_limit)
async def create_from_json(
    request: Request,
    body: ShortenRequest,
    url_service: URLShorteningService = Depends(get_url_service),
    settings: Settings = Depends(get_settings),
) -> ShortenResponse:
    key = await _create(url_service, body.url)
    return ShortenResponse(
        key=key,
        short_url=f"{settings.BASE_URL.rstrip('/')}/{key}",
        target_url=body.url
    )


@router.get(
    "/{key}",
    status_code=status.HTTP_301_MOVED_PERMANENTLY,
    summary="Redirect to target URL",
    description="Takes a short key and redirects permanently to the stored URL"
)
@limiter.limit(resolve_limit)
async def redirect_to_url(
    key: str,
    request: Request,
    redirect_service: RedirectService = Depends(get_redirect_service),
) -> RedirectResponse:
    """
    Raises:
        HTTPException 400: If key contains characters outside the base58 alphabet
        HTTPException 404: If key not found or target is not an http URL
        HTTPException 500: If the store fails
    """
    sanitized_key = sanitize_short_key(key)
    if not sanitized_key:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid short key format: '{key}'"
        )

    try:
        target_url = await redirect_service.get_redirect_url(sanitized_key)
    except ShortKeyNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short key '{sanitized_key}' not found"
        )
    except StorageError as e:
        logger.error(f"Failed to resolve {sanitized_key}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

    return RedirectResponse(
        url=target_url,
        status_code=status.HTTP_301_MOVED_PERMANENTLY
    )
