"""Pydantic schemas for the upload API."""
from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Response after a successful upload."""
    url: str = Field(..., description="Public URL of the stored object")


class SlugResponse(BaseModel):
    slug: str


class ErrorResponse(BaseModel):
    error: str


class UploadResult(BaseModel):
    """What the upload service stored and where it can be fetched."""
    key: str
    url: str
    size_bytes: int
    content_type: str
