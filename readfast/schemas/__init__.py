"""Pydantic schemas for the ReadFast API."""

from readfast.schemas.document import ErrorResponse, ExtractResponse, ExtractUrlRequest
from readfast.schemas.token import TokenDTO, TokenizeRequest, TokenizeResponse

__all__ = [
    # Extraction schemas
    "ExtractUrlRequest",
    "ExtractResponse",
    "ErrorResponse",
    # Token schemas
    "TokenizeRequest",
    "TokenDTO",
    "TokenizeResponse",
]
