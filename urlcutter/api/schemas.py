"""
API Request and Response Schemas

This module defines the Pydantic models for the JSON create endpoint.
The form endpoint (POST /create) answers with the bare key as plain text.
"""

from pydantic import BaseModel, Field


class ShortenRequest(BaseModel):
    """Request model for URL shortening endpoint."""
    url: str = Field(..., description="The long URL to shorten, must start with http")


class ShortenResponse(BaseModel):
    """Response model for URL shortening endpoint."""
    key: str = Field(..., description="The issued short key")
    short_url: str = Field(..., description="The complete short URL")
    target_url: str = Field(..., description="The original long URL")
