"""Stateless tokenization endpoint for clients that render playback themselves."""

import logging

from fastapi import APIRouter, Depends

from readfast.config import Settings, get_settings
from readfast.schemas.token import TokenDTO, TokenizeRequest, TokenizeResponse
from readfast.services.playback.scheduler import clamp
from readfast.services.tokenizer import (
    calculate_interval_ms,
    estimate_reading_minutes,
    focal_split,
    tokenize,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/documents/tokenize", response_model=TokenizeResponse)
def tokenize_document(
    request: TokenizeRequest,
    settings: Settings = Depends(get_settings),
) -> TokenizeResponse:
    """Split text into tokens with their focal splits and a reading estimate."""
    wpm = clamp(request.wpm or settings.default_wpm, settings.min_wpm, settings.max_wpm)
    tokens = tokenize(request.text)
    logger.debug("Tokenized %d words at %d wpm", len(tokens), wpm)

    dtos = []
    for index, token in enumerate(tokens):
        split = focal_split(token)
        dtos.append(
            TokenDTO(
                index=index,
                text=token,
                orp_index=split.orp_index,
                prefix=split.prefix,
                focal=split.focal,
                suffix=split.suffix,
            )
        )

    return TokenizeResponse(
        total_words=len(tokens),
        wpm=wpm,
        interval_ms=calculate_interval_ms(wpm),
        estimated_minutes=estimate_reading_minutes(len(tokens), wpm),
        tokens=dtos,
    )
