"""Pydantic schemas for token-related API endpoints."""

from pydantic import BaseModel, Field


class TokenizeRequest(BaseModel):
    text: str = Field(..., min_length=1)
    wpm: int | None = Field(None, ge=1)


class TokenDTO(BaseModel):
    index: int
    text: str
    orp_index: int
    prefix: str
    focal: str
    suffix: str


class TokenizeResponse(BaseModel):
    total_words: int
    wpm: int
    interval_ms: float
    estimated_minutes: int
    tokens: list[TokenDTO]
