"""
Readable-text extraction from web pages.

fetch_url_text() downloads a page with httpx and extract_from_html()
reduces it to its main article text with BeautifulSoup. Failures are
returned as ExtractionResult errors with messages meant for the reader.
"""

from __future__ import annotations

import logging
import re
from typing import Optional
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup, Comment

from readfast.services.extraction.result import ExtractionError, ExtractionResult

logger = logging.getLogger(__name__)

REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Cache-Control": "no-cache",
}

# Page chrome that never holds article text
NOISE_TAGS = ["script", "style", "noscript", "nav", "header", "footer", "aside", "form"]

# Main-content candidates, most specific first
CONTENT_SELECTORS = [
    "article",
    "main",
    'div[class*="content"]',
    'div[class*="post"]',
    'div[class*="article"]',
    "div#content",
    "div#main",
]

BLOCK_TAGS = ["p", "div", "br", "h1", "h2", "h3", "h4", "h5", "h6", "li", "tr", "td", "th"]

INVALID_URL = "Please enter a valid URL starting with https://"
BLOCKED = "This website blocks automated access. Try copying and pasting the text instead."
NOT_FOUND = "Page not found. Please check the URL and try again."
NOT_HTML = "This URL does not point to a readable web page."
TOO_SHORT = (
    "Could not extract enough readable text from this page. "
    "Try a different article or paste the text directly."
)
CONNECTION_FAILED = (
    "Could not connect to this website. "
    "Please check your internet connection and try again."
)
GENERIC_FAILURE = "Something went wrong. Please try again or paste the text directly."

_SPACES = re.compile(r"[^\S\n]+")
_SPACE_AFTER_NEWLINE = re.compile(r"\n[^\S\n]+")
_SPACE_BEFORE_NEWLINE = re.compile(r"[^\S\n]+\n")
_MANY_NEWLINES = re.compile(r"\n{3,}")


def extract_from_html(html: str, main_content_min_chars: int = 500) -> str:
    """
    Extract readable text from an HTML document.

    Page chrome (navigation, headers, footers, forms, scripts) is removed.
    The first main-content container whose text is longer than
    main_content_min_chars replaces the whole body. Block elements become
    line breaks and runs of spaces collapse.
    """
    soup = BeautifulSoup(html, "html.parser")

    for tag in soup.find_all(NOISE_TAGS):
        if not tag.decomposed:
            tag.decompose()
    for comment in soup.find_all(string=lambda node: isinstance(node, Comment)):
        comment.extract()

    root = soup.body or soup
    for selector in CONTENT_SELECTORS:
        candidate = soup.select_one(selector)
        if candidate is not None and len(candidate.get_text()) > main_content_min_chars:
            root = candidate
            break

    for tag in root.find_all(BLOCK_TAGS):
        tag.insert_before("\n")
        tag.insert_after("\n")

    text = root.get_text(" ")
    text = _SPACES.sub(" ", text)
    text = _SPACE_AFTER_NEWLINE.sub("\n", text)
    text = _SPACE_BEFORE_NEWLINE.sub("\n", text)
    text = _MANY_NEWLINES.sub("\n\n", text)
    return text.strip()


def validate_url(url: Optional[str]) -> str:
    """Return url if it is an absolute http(s) URL, else raise ExtractionError."""
    if not url or not isinstance(url, str):
        raise ExtractionError("URL is required")

    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ExtractionError(INVALID_URL)
    return url.strip()


def _check_response(response: httpx.Response) -> None:
    if response.status_code == 403:
        raise ExtractionError(BLOCKED)
    if response.status_code == 404:
        raise ExtractionError(NOT_FOUND)
    if not response.is_success:
        raise ExtractionError(f"Could not access this page (Error {response.status_code})")

    content_type = response.headers.get("content-type", "")
    if "text/html" not in content_type and "application/xhtml" not in content_type:
        raise ExtractionError(NOT_HTML)


async def fetch_url_text(
    url: Optional[str],
    *,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 15.0,
    min_chars: int = 100,
    main_content_min_chars: int = 500,
) -> ExtractionResult:
    """
    Download a web page and extract its readable text.

    Args:
        url: Page address; must be http or https.
        client: Optional shared client (tests pass one with a mock transport).
        timeout: Request timeout in seconds when no client is given.
        min_chars: Minimum extracted length to count as readable.
        main_content_min_chars: See extract_from_html().

    Returns:
        ExtractionResult with the text, or with a user-facing error.
    """
    try:
        target = validate_url(url)

        if client is None:
            async with httpx.AsyncClient(
                headers=REQUEST_HEADERS, timeout=timeout, follow_redirects=True
            ) as owned_client:
                response = await owned_client.get(target)
        else:
            response = await client.get(target, headers=REQUEST_HEADERS)

        _check_response(response)
        text = extract_from_html(response.text, main_content_min_chars)
        if len(text) < min_chars:
            raise ExtractionError(TOO_SHORT)

    except ExtractionError as exc:
        logger.info("URL extraction rejected for %s: %s", url, exc)
        return ExtractionResult.failure(str(exc))
    except httpx.HTTPError:
        logger.warning("Could not fetch %s", url, exc_info=True)
        return ExtractionResult.failure(CONNECTION_FAILED)

    logger.info("Extracted %d characters from %s", len(text), target)
    return ExtractionResult.success(text)
