"""Request DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class LookupCacheRequest(BaseModel):
    """Request DTO for looking up a cached response.

    The handler will convert this to internal calls to the service layer.
    """

    prompt: str = Field(..., description="The prompt about to be sent upstream")
    model: str = Field(..., description="The generation model identifier", min_length=1)
    options: dict[str, Any] | None = Field(
        None,
        description="Request options that change the response (temperature, max tokens, ...)",
    )


class StoreCacheRequest(BaseModel):
    """Request DTO for storing a fresh upstream response."""

    prompt: str = Field(..., description="The prompt that produced the response")
    model: str = Field(..., description="The model that produced the response", min_length=1)
    response: str = Field(..., description="The generated text to cache")
    options: dict[str, Any] | None = Field(
        None,
        description="Request options that took part in the request",
    )
    token_count: int | None = Field(
        None,
        description="Approximate output size; defaults to len(response) / 4",
        ge=0,
    )
    ttl_seconds: float | None = Field(
        None,
        description="Override the default time-to-live (zero or negative expires on next read)",
    )
    tags: dict[str, Any] = Field(
        default_factory=dict,
        description="Optional metadata tags (generation_type, project_id, ...)",
    )


class ThresholdRequest(BaseModel):
    """Request DTO for updating the similarity threshold."""

    threshold: float = Field(..., description="Minimum Jaccard similarity for a near-duplicate hit")


class InvalidateTagsRequest(BaseModel):
    """Request DTO for tag-based invalidation."""

    tags: dict[str, Any] = Field(
        ...,
        description="Entries carrying all of these tag values are removed (e.g. project_id)",
        min_length=1,
    )
