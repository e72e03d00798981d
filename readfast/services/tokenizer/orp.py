"""ORP (Optimal Recognition Point) calculator for RSVP reading."""

from dataclasses import dataclass
from functools import lru_cache

from readfast.services.tokenizer.constants import (
    ORP_LONG_WORD_MAX,
    ORP_MEDIUM_WORD_MAX,
    ORP_SHORT_WORD_MAX,
    ORP_SINGLE_CHAR_MAX,
)


@dataclass(frozen=True)
class FocalSplit:
    """A token split around its focal character.

    Attributes:
        prefix: Characters before the focal character.
        focal: The highlighted focal character (empty for an empty token).
        suffix: Characters after the focal character.
    """

    prefix: str
    focal: str
    suffix: str

    @property
    def orp_index(self) -> int:
        return len(self.prefix)

    @property
    def text(self) -> str:
        return f"{self.prefix}{self.focal}{self.suffix}"


EMPTY_SPLIT = FocalSplit("", "", "")


class ORPCalculator:
    """
    Calculate the Optimal Recognition Point for words.

    The ORP is the character position in a word where the eye naturally
    focuses for fastest recognition. The highlighted character sits near
    the visual center of the word, biased toward its first half:

        length <= 1   -> 0
        length <= 5   -> length // 2
        length <= 9   -> length // 2 - 1
        length <= 13  -> length // 3
        otherwise     -> length // 4
    """

    def calculate(self, word: str) -> int:
        """
        Calculate the ORP index for a word.

        Args:
            word: The word to calculate ORP for.

        Returns:
            The 0-indexed position of the ORP character. Empty words
            return 0 so callers rendering a blank frame need no guard.
        """
        length = len(word)

        if length <= ORP_SINGLE_CHAR_MAX:
            return 0
        if length <= ORP_SHORT_WORD_MAX:
            return length // 2
        if length <= ORP_MEDIUM_WORD_MAX:
            return length // 2 - 1
        if length <= ORP_LONG_WORD_MAX:
            return length // 3
        return length // 4

    def split_for_display(self, word: str) -> FocalSplit:
        """
        Split a word into three parts for ORP display.

        This is useful for UI rendering where the ORP character
        is highlighted differently (e.g., colored and bold) from the
        rest of the word.

        Args:
            word: The word to split.

        Returns:
            FocalSplit of (prefix, focal, suffix).

        Example:
            >>> calc = ORPCalculator()
            >>> calc.split_for_display("reading")
            FocalSplit(prefix='re', focal='a', suffix='ding')
        """
        return _cached_split(word)


@lru_cache(maxsize=4096)
def _cached_split(word: str) -> FocalSplit:
    if not word:
        return EMPTY_SPLIT

    index = _DEFAULT_CALCULATOR.calculate(word)
    return FocalSplit(word[:index], word[index], word[index + 1:])


_DEFAULT_CALCULATOR = ORPCalculator()


def orp_index(token: str) -> int:
    """Return the focal character index of a token."""
    return _DEFAULT_CALCULATOR.calculate(token)


def focal_split(token: str) -> FocalSplit:
    """Return the (prefix, focal, suffix) split of a token."""
    return _DEFAULT_CALCULATOR.split_for_display(token)
