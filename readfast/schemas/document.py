"""Pydantic schemas for text extraction endpoints."""

from pydantic import BaseModel


class ExtractUrlRequest(BaseModel):
    url: str | None = None


class ExtractResponse(BaseModel):
    text: str


class ErrorResponse(BaseModel):
    error: str
