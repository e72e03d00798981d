"""
Local persistence for recent documents and usage counters.

Everything stored here is a best-effort cache: unreadable or corrupt data
reads as empty, and failed writes are logged rather than raised into the
reader. Records are pydantic models serialised to JSON.

Recent documents are keyed by a non-cryptographic fingerprint of the
first characters of the text. Two documents that share the same opening
get the same id and the later save overwrites the earlier entry.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from readfast.services.tokenizer.tokenizer import count_words, tokenize

logger = logging.getLogger(__name__)

RECENT_DOCUMENTS_KEY = "readfast_recent_docs"

MAX_TITLE_LINE_CHARS = 60
MAX_TITLE_WORDS = 6
MAX_TITLE_CHARS = 50
PREVIEW_CHARS = 100
FALLBACK_RECENT_DOCUMENTS = 5

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class StorageError(Exception):
    """Raised when a store cannot persist a value."""


# =============================================================================
# Key-value stores
# =============================================================================


class KeyValueStore(Protocol):
    """Minimal JSON-value store."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryStore:
    """Dictionary-backed store used for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """
    Store persisted as a single JSON object on disk.

    The file is rewritten atomically (temp file + rename) on every set.
    A missing or corrupt file reads as an empty store.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError):
            logger.warning("Could not read store at %s; starting empty", self.path)
            return {}

        if not isinstance(data, dict):
            logger.warning("Store at %s is not a JSON object; ignoring it", self.path)
            return {}
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Could not write {self.path}: {exc}") from exc

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


# =============================================================================
# Fingerprint, title and preview
# =============================================================================

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def fingerprint(text: str, sample_chars: int = 500) -> str:
    """
    Compute a short id for a document from its opening characters.

    A 32-bit signed rolling hash (h = h * 31 + unit) over the first
    sample_chars UTF-16 code units, rendered as the base-36 absolute value.
    Ids are stable across sessions and match ids produced by the browser
    client. Not collision resistant.
    """
    units = text.encode("utf-16-le")[: 2 * sample_chars]

    value = 0
    for i in range(0, len(units) - 1, 2):
        unit = units[i] | (units[i + 1] << 8)
        value = (value * 31 + unit) & 0xFFFFFFFF

    if value >= 0x80000000:
        value -= 0x100000000
    return _to_base36(abs(value))


def generate_title(text: str) -> str:
    """Use the first line when it is short, otherwise the first few words."""
    first_line = text.split("\n", 1)[0].strip()
    if 0 < len(first_line) <= MAX_TITLE_LINE_CHARS:
        return first_line

    words = " ".join(tokenize(text)[:MAX_TITLE_WORDS])
    if len(words) > MAX_TITLE_CHARS:
        return words[:MAX_TITLE_CHARS] + "..."
    return words


def generate_preview(text: str) -> str:
    preview = text[:PREVIEW_CHARS].strip()
    if len(text) > PREVIEW_CHARS:
        preview += "..."
    return preview


# =============================================================================
# Recent documents
# =============================================================================


class RecentDocument(BaseModel):
    """A document the user opened recently."""

    id: str
    title: str
    preview: str
    word_count: int = Field(..., ge=0)
    last_read: datetime
    progress: int = Field(0, ge=0, le=100)


_DOCUMENT_LIST = TypeAdapter(List[RecentDocument])


class RecentDocumentStore:
    """Most-recently-read documents, newest first."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        max_documents: int = 10,
        sample_chars: int = 500,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self.max_documents = max_documents
        self.sample_chars = sample_chars
        self._clock = clock

    def list(self) -> List[RecentDocument]:
        raw = self._store.get(RECENT_DOCUMENTS_KEY)
        if not raw:
            return []
        try:
            return _DOCUMENT_LIST.validate_python(raw)
        except ValidationError:
            logger.warning("Discarding unreadable recent documents list")
            return []

    def get(self, document_id: str) -> Optional[RecentDocument]:
        return next((doc for doc in self.list() if doc.id == document_id), None)

    def save_document(self, text: str, progress: int = 0) -> RecentDocument:
        """
        Record text as the most recently read document.

        An entry with the same fingerprint is updated in place; otherwise
        the document is added at the front and the list is trimmed.
        """
        docs = self.list()
        document = RecentDocument(
            id=fingerprint(text, self.sample_chars),
            title=generate_title(text),
            preview=generate_preview(text),
            word_count=count_words(text),
            last_read=self._clock(),
            progress=progress,
        )

        for index, existing in enumerate(docs):
            if existing.id == document.id:
                docs[index] = document
                break
        else:
            docs.insert(0, document)

        trimmed = docs[: self.max_documents]
        try:
            self._persist(trimmed)
        except StorageError:
            logger.warning("Storage full; keeping only %d recent documents", FALLBACK_RECENT_DOCUMENTS)
            try:
                self._persist(trimmed[:FALLBACK_RECENT_DOCUMENTS])
            except StorageError:
                logger.warning("Could not save recent document %s", document.id)

        return document

    def update_progress(self, document_id: str, progress: int) -> bool:
        """Update stored progress; returns False when the id is unknown."""
        docs = self.list()
        for index, doc in enumerate(docs):
            if doc.id == document_id:
                docs[index] = doc.model_copy(
                    update={
                        "progress": max(0, min(100, progress)),
                        "last_read": self._clock(),
                    }
                )
                self._persist(docs)
                return True
        return False

    def delete(self, document_id: str) -> None:
        self._persist([doc for doc in self.list() if doc.id != document_id])

    def clear(self) -> None:
        self._store.delete(RECENT_DOCUMENTS_KEY)

    def _persist(self, docs: List[RecentDocument]) -> None:
        self._store.set(RECENT_DOCUMENTS_KEY, _DOCUMENT_LIST.dump_python(docs, mode="json"))
