"""Text sources: web pages and uploaded files."""

from .result import ExtractionError, ExtractionResult
from .markdown import strip_markdown
from .web import extract_from_html, fetch_url_text, validate_url
from .files import SUPPORTED_EXTENSIONS, extract_from_file, source_type_for

__all__ = [
    "ExtractionError",
    "ExtractionResult",
    "strip_markdown",
    "extract_from_html",
    "fetch_url_text",
    "validate_url",
    "extract_from_file",
    "source_type_for",
    "SUPPORTED_EXTENSIONS",
]
