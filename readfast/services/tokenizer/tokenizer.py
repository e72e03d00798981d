"""
Word tokenizer for RSVP reading.

Splits raw text into the ordered sequence of display tokens that the
playback scheduler steps through. Tokens never contain whitespace and are
never empty.

Example usage:
    >>> tokenize("The quick  brown\\nfox")
    ['The', 'quick', 'brown', 'fox']
"""

from typing import List

from readfast.services.tokenizer.constants import WHITESPACE_PATTERN


def tokenize(text: str) -> List[str]:
    """
    Split text into tokens (words) for RSVP display.

    Splits on runs of any Unicode whitespace, trims each piece and drops
    empty pieces. Empty or all-whitespace input yields an empty list.

    Args:
        text: The input text to tokenize.

    Returns:
        List of word tokens in document order.
    """
    if not text:
        return []

    return [
        piece.strip()
        for piece in WHITESPACE_PATTERN.split(text)
        if piece.strip()
    ]


def count_words(text: str) -> int:
    """Count the number of words in text."""
    return len(tokenize(text))
