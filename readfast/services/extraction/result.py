"""Result type shared by all text sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class ExtractionError(ValueError):
    """Raised inside extractors with a message safe to show to the user."""


@dataclass(frozen=True)
class ExtractionResult:
    """Either extracted text or a user-facing error, never both."""

    text: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, text: str) -> "ExtractionResult":
        return cls(text=text)

    @classmethod
    def failure(cls, error: str) -> "ExtractionResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None
