"""
Text extraction from uploaded files (PDF, EPUB, TXT, Markdown).

extract_from_file() dispatches on the file extension. Parsing errors
become ExtractionResult errors; nothing raises past this module.
"""

from __future__ import annotations

import io
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Callable, Dict, List

import ebooklib
from bs4 import BeautifulSoup
from ebooklib import epub
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from readfast.models.enums import SourceType
from readfast.services.extraction.markdown import strip_markdown
from readfast.services.extraction.result import ExtractionError, ExtractionResult

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {
    ".pdf": SourceType.PDF,
    ".epub": SourceType.EPUB,
    ".txt": SourceType.TEXT,
    ".md": SourceType.MARKDOWN,
}

UNSUPPORTED_TYPE = "Unsupported file type. Please upload a PDF, EPUB, TXT or MD file."
EMPTY_FILE = "No readable text was found in this file."

_EPUB_SKIP_TAGS = ["script", "style", "noscript"]
_EPUB_BLOCK_TAGS = ["p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li", "br"]
_NEWLINE_SPACES = re.compile(r"\n\s+")
_MANY_NEWLINES = re.compile(r"\n{3,}")


def source_type_for(filename: str) -> SourceType:
    """Map a filename to its source type, raising ExtractionError if unsupported."""
    extension = Path(filename or "").suffix.lower()
    try:
        return SUPPORTED_EXTENSIONS[extension]
    except KeyError:
        raise ExtractionError(UNSUPPORTED_TYPE) from None


def extract_pdf_text(data: bytes) -> str:
    """Concatenate the text of every PDF page, one page per paragraph."""
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [(page.extract_text() or "").strip() for page in reader.pages]
    except (PyPdfError, ValueError, KeyError) as exc:
        raise ExtractionError("Could not read this PDF file.") from exc

    return "\n\n".join(page for page in pages if page)


def _epub_document_text(content: bytes) -> str:
    soup = BeautifulSoup(content, "html.parser")
    for tag in soup.find_all(_EPUB_SKIP_TAGS):
        if not tag.decomposed:
            tag.decompose()

    body = soup.body or soup
    for tag in body.find_all(_EPUB_BLOCK_TAGS):
        tag.insert_after("\n")

    text = body.get_text(" ")
    text = _NEWLINE_SPACES.sub("\n", text)
    text = _MANY_NEWLINES.sub("\n\n", text)
    return text.strip()


def extract_epub_text(data: bytes) -> str:
    """Extract chapter text in spine order; unreadable chapters are skipped."""
    # ebooklib only reads from a path
    fd, tmp_name = tempfile.mkstemp(suffix=".epub")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        try:
            book = epub.read_epub(tmp_name, options={"ignore_ncx": True})
        except Exception as exc:
            raise ExtractionError("Could not read this EPUB file.") from exc
    finally:
        Path(tmp_name).unlink(missing_ok=True)

    documents = {
        item.get_id(): item
        for item in book.get_items_of_type(ebooklib.ITEM_DOCUMENT)
    }
    ordered_ids = [item_id for item_id, _ in book.spine if item_id in documents]
    if not ordered_ids:
        ordered_ids = list(documents)

    parts: List[str] = []
    for item_id in ordered_ids:
        item = documents[item_id]
        try:
            text = _epub_document_text(item.get_content())
        except Exception:
            logger.warning("Failed to load EPUB item: %s", item.get_name())
            continue
        if text:
            parts.append(text)

    return "\n\n".join(parts)


def decode_text(data: bytes) -> str:
    """Decode a plain-text upload as UTF-8, tolerating a BOM and bad bytes."""
    return data.decode("utf-8-sig", errors="replace")


_EXTRACTORS: Dict[SourceType, Callable[[bytes], str]] = {
    SourceType.PDF: extract_pdf_text,
    SourceType.EPUB: extract_epub_text,
    SourceType.TEXT: decode_text,
    SourceType.MARKDOWN: lambda data: strip_markdown(decode_text(data)),
}


def extract_from_file(filename: str, data: bytes) -> ExtractionResult:
    """
    Extract readable text from an uploaded file.

    Args:
        filename: Original file name; its extension selects the parser.
        data: Raw file contents.

    Returns:
        ExtractionResult with the text, or with a user-facing error.
    """
    try:
        source_type = source_type_for(filename)
        text = _EXTRACTORS[source_type](data).strip()
        if not text:
            raise ExtractionError(EMPTY_FILE)
    except ExtractionError as exc:
        logger.info("File extraction rejected for %s: %s", filename, exc)
        return ExtractionResult.failure(str(exc))

    logger.info("Extracted %d characters from %s (%s)", len(text), filename, source_type.value)
    return ExtractionResult.success(text)
