"""Tests for local persistence: stores, fingerprints and recent documents."""

import json
import re
from datetime import timedelta

import pytest

from readfast.services.storage import (
    InMemoryStore,
    JsonFileStore,
    RECENT_DOCUMENTS_KEY,
    RecentDocumentStore,
    StorageError,
    fingerprint,
    generate_preview,
    generate_title,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def documents(store, clock):
    return RecentDocumentStore(store, clock=clock)


class FlakyStore(InMemoryStore):
    """Store that rejects writes of more than `capacity` documents."""

    def __init__(self, capacity):
        super().__init__()
        self.capacity = capacity

    def set(self, key, value):
        if len(value) > self.capacity:
            raise StorageError("quota exceeded")
        super().set(key, value)


# =============================================================================
# Key-value stores
# =============================================================================


class TestJsonFileStore:
    def test_round_trip_on_disk(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        store = JsonFileStore(path)

        store.set("greeting", {"text": "hi"})

        assert JsonFileStore(path).get("greeting") == {"text": "hi"}
        assert json.loads(path.read_text(encoding="utf-8")) == {"greeting": {"text": "hi"}}

    def test_missing_file_reads_empty(self, tmp_path):
        assert JsonFileStore(tmp_path / "absent.json").get("anything", "default") == "default"

    def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonFileStore(path).get("key") is None

    def test_non_object_file_reads_empty(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert JsonFileStore(path).get("key") is None

    def test_delete(self, tmp_path):
        store = JsonFileStore(tmp_path / "store.json")
        store.set("a", 1)
        store.set("b", 2)
        store.delete("a")
        store.delete("missing")
        assert store.get("a") is None
        assert store.get("b") == 2

    def test_unwritable_location_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not directory", encoding="utf-8")
        store = JsonFileStore(blocker / "store.json")

        with pytest.raises(StorageError):
            store.set("a", 1)


# =============================================================================
# Fingerprint, title, preview
# =============================================================================


class TestFingerprint:
    @pytest.mark.parametrize("text,expected", [("", "0"), ("a", "2p"), ("ab", "2e9")])
    def test_known_values(self, text, expected):
        assert fingerprint(text) == expected

    def test_deterministic_base36(self):
        text = "Call me Ishmael. " * 100
        assert fingerprint(text) == fingerprint(text)
        assert re.fullmatch(r"[0-9a-z]+", fingerprint(text))

    def test_only_opening_characters_count(self):
        """Documents sharing their first 500 characters collide."""
        opening = "x" * 500
        assert fingerprint(opening + " ending one") == fingerprint(opening + " ending two")

    def test_different_openings_differ(self):
        assert fingerprint("first document") != fingerprint("second document")

    def test_sample_size_is_configurable(self):
        assert fingerprint("abcdef", sample_chars=3) == fingerprint("abcxyz", sample_chars=3)


class TestTitleAndPreview:
    def test_short_first_line_is_title(self):
        assert generate_title("My Essay\nBody text follows here.") == "My Essay"

    def test_long_first_line_uses_first_words(self):
        text = "This opening line is far too long to be used as a title for the document"
        assert generate_title(text) == "This opening line is far too"

    def test_long_words_truncated(self):
        text = " ".join(["supercalifragilistic"] * 8)
        title = generate_title(text)
        assert title.endswith("...")
        assert len(title) == 53

    def test_preview_truncates(self):
        text = "word " * 50
        preview = generate_preview(text)
        assert preview.endswith("...")
        assert len(preview) <= 103

    def test_short_preview_untouched(self):
        assert generate_preview("  Short text.  ") == "Short text."


# =============================================================================
# Recent documents
# =============================================================================


class TestRecentDocuments:
    def test_save_and_list(self, documents, clock):
        doc = documents.save_document("Hello world, this is a test.")

        assert documents.list() == [doc]
        assert doc.word_count == 6
        assert doc.title == "Hello world, this is a test."
        assert doc.last_read == clock.now
        assert doc.progress == 0

    def test_newest_first(self, documents):
        documents.save_document("first text")
        documents.save_document("second text")
        assert [d.title for d in documents.list()] == ["second text", "first text"]

    def test_same_text_updates_in_place(self, documents, clock):
        documents.save_document("first text")
        documents.save_document("second text")
        clock.now += timedelta(hours=1)

        updated = documents.save_document("first text", progress=40)

        listed = documents.list()
        assert len(listed) == 2
        assert listed[1].id == updated.id
        assert listed[1].progress == 40
        assert listed[1].last_read == clock.now

    def test_trimmed_to_max(self, store, clock):
        documents = RecentDocumentStore(store, max_documents=3, clock=clock)
        for i in range(5):
            documents.save_document(f"document number {i}")

        assert [d.title for d in documents.list()] == [
            "document number 4",
            "document number 3",
            "document number 2",
        ]

    def test_full_storage_keeps_five(self, clock):
        store = FlakyStore(capacity=5)
        documents = RecentDocumentStore(store, clock=clock)
        for i in range(7):
            documents.save_document(f"document number {i}")

        assert len(documents.list()) == 5
        assert documents.list()[0].title == "document number 6"

    def test_update_progress(self, documents, clock):
        doc = documents.save_document("some text to read")
        clock.now += timedelta(minutes=5)

        assert documents.update_progress(doc.id, 75)
        stored = documents.get(doc.id)
        assert stored.progress == 75
        assert stored.last_read == clock.now

    def test_update_progress_unknown_id(self, documents):
        assert not documents.update_progress("nope", 10)

    def test_delete_and_clear(self, documents):
        a = documents.save_document("alpha text")
        documents.save_document("beta text")

        documents.delete(a.id)
        assert [d.title for d in documents.list()] == ["beta text"]

        documents.clear()
        assert documents.list() == []

    def test_corrupt_list_reads_empty(self, store, documents):
        store.set(RECENT_DOCUMENTS_KEY, [{"id": 1}])
        assert documents.list() == []

    def test_persists_across_instances(self, tmp_path, clock):
        path = tmp_path / "readfast.json"
        doc = RecentDocumentStore(JsonFileStore(path), clock=clock).save_document("kept text")

        reloaded = RecentDocumentStore(JsonFileStore(path), clock=clock).list()

        assert reloaded == [doc]
