"""
Reader session: the single entry point the presentation layer talks to.

ReaderSession wires the tokenizer, scheduler, input router and accounting
together and notifies the optional collaborators:

- Entitlements gates load() and load_file() and supplies the rate ceiling.
- RecentDocumentStore records each loaded document and its progress.

Collaborator failures are logged and never interrupt playback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from readfast.config import Settings, get_settings
from readfast.models.enums import Stimulus
from readfast.services.entitlement import Entitlements
from readfast.services.extraction.files import extract_from_file
from readfast.services.extraction.result import ExtractionResult
from readfast.services.storage import RecentDocumentStore, StorageError
from readfast.services.tokenizer.constants import WPM_STEP
from readfast.services.tokenizer.tokenizer import tokenize
from readfast.services.playback.accounting import ReaderView, SessionAccounting
from readfast.services.playback.input_router import InputRouter, KeyEvent
from readfast.services.playback.scheduler import PlaybackScheduler, PlaybackSnapshot
from readfast.services.playback.timer import Timer

logger = logging.getLogger(__name__)

NO_TEXT_REASON = "No readable words found in this text."
UPLOAD_REQUIRES_PREMIUM = (
    "File uploads are a Premium feature. "
    "Upgrade to upload PDF, EPUB, and TXT files directly."
)


@dataclass(frozen=True)
class LoadResult:
    """Outcome of ReaderSession.load()."""

    loaded: bool
    total_words: int = 0
    document_id: Optional[str] = None
    reason: Optional[str] = None


class ReaderSession:
    """
    Facade over the RSVP engine for one reader.

    Args:
        scheduler: The playback scheduler to drive.
        entitlements: Optional gate consulted before every load.
        documents: Optional recent-documents store notified on load and as
            the cursor advances.
        rate_step: WPM change for the rate up/down shortcuts.
        progress_save_interval: While playing, persist progress every this
            many advances. Progress is also saved when playback stops with a
            changed percentage and before new text replaces the document.
    """

    def __init__(
        self,
        scheduler: PlaybackScheduler,
        *,
        entitlements: Optional[Entitlements] = None,
        documents: Optional[RecentDocumentStore] = None,
        rate_step: int = WPM_STEP,
        progress_save_interval: int = 25,
        accounting: Optional[SessionAccounting] = None,
    ) -> None:
        self.scheduler = scheduler
        self.entitlements = entitlements
        self.documents = documents
        self.router = InputRouter(scheduler, rate_step=rate_step)
        self.accounting = accounting or SessionAccounting()
        self.progress_save_interval = max(1, progress_save_interval)

        self._document_id: Optional[str] = None
        self._saved_cursor = 0
        self._saved_percent = 0

        self.refresh_entitlements()
        scheduler.subscribe(self._on_change)

    @classmethod
    def create(
        cls,
        timer: Timer,
        *,
        settings: Optional[Settings] = None,
        entitlements: Optional[Entitlements] = None,
        documents: Optional[RecentDocumentStore] = None,
    ) -> "ReaderSession":
        """Build a session whose bounds come from application settings."""
        settings = settings or get_settings()
        scheduler = PlaybackScheduler(
            timer,
            min_rate=settings.min_wpm,
            max_rate=settings.max_wpm,
            rate=settings.default_wpm,
        )
        return cls(
            scheduler,
            entitlements=entitlements,
            documents=documents,
            rate_step=settings.wpm_step,
            progress_save_interval=settings.progress_save_interval,
        )

    @property
    def document_id(self) -> Optional[str]:
        return self._document_id

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self, text: str) -> LoadResult:
        """Tokenize text and load it, subject to the entitlement gate."""
        if self.entitlements is not None:
            permission = self.entitlements.check_can_read_more()
            if not permission.allowed:
                logger.info("Load refused: %s", permission.reason)
                return LoadResult(loaded=False, reason=permission.reason)

        self._save_progress()

        tokens = tokenize(text)
        self._document_id = None
        self._saved_cursor = 0
        self._saved_percent = 0
        self.scheduler.load(tokens)

        if not tokens:
            return LoadResult(loaded=False, reason=NO_TEXT_REASON)

        if self.entitlements is not None:
            self.entitlements.record_reading(len(tokens))

        if self.documents is not None:
            try:
                self._document_id = self.documents.save_document(text).id
            except StorageError:
                logger.warning("Could not record recent document", exc_info=True)

        logger.info("Loaded document %s with %d words", self._document_id, len(tokens))
        return LoadResult(
            loaded=True,
            total_words=len(tokens),
            document_id=self._document_id,
        )

    def load_extraction(self, result: ExtractionResult) -> LoadResult:
        """Load the text of an extraction result, or pass its error through."""
        if result.error is not None or result.text is None:
            return LoadResult(loaded=False, reason=result.error)
        return self.load(result.text)

    def load_file(self, filename: str, data: bytes) -> LoadResult:
        """Extract an uploaded file and load it. Uploads require a tier that allows them."""
        if self.entitlements is not None and not self.entitlements.can_upload_files:
            logger.info("Upload of %s refused for the current tier", filename)
            return LoadResult(loaded=False, reason=UPLOAD_REQUIRES_PREMIUM)
        return self.load_extraction(extract_from_file(filename, data))

    def new_text(self) -> None:
        """Discard the current text (the "New Text" action)."""
        self._save_progress()
        self._document_id = None
        self.scheduler.unload()

    def refresh_entitlements(self) -> None:
        """Re-read the rate ceiling, e.g. after a subscription change."""
        if self.entitlements is not None:
            self.scheduler.set_max_rate(self.entitlements.effective_max_rate)

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def toggle(self) -> None:
        self.scheduler.toggle()

    def step(self, direction: int) -> None:
        self.scheduler.step(direction)

    def restart(self) -> None:
        self.scheduler.restart()

    def set_rate(self, rate: int) -> None:
        self.scheduler.set_rate(rate)

    def handle_key(self, event: KeyEvent) -> bool:
        return self.router.handle_key(event)

    def dispatch(self, stimulus: Stimulus) -> None:
        self.router.dispatch(stimulus)

    def state(self) -> ReaderView:
        """Read-only snapshot for rendering."""
        return self.accounting.snapshot(self.scheduler.snapshot())

    # -------------------------------------------------------------------------
    # Progress persistence
    # -------------------------------------------------------------------------

    def _on_change(self, snapshot: PlaybackSnapshot) -> None:
        if self._document_id is None or not snapshot.tokens:
            return

        if snapshot.is_playing:
            if abs(snapshot.cursor - self._saved_cursor) < self.progress_save_interval:
                return
        elif (
            self.accounting.progress_percent(snapshot.cursor, snapshot.total)
            == self._saved_percent
        ):
            return

        self._save_progress(snapshot)

    def _save_progress(self, snapshot: Optional[PlaybackSnapshot] = None) -> None:
        if self.documents is None or self._document_id is None:
            return

        snapshot = snapshot or self.scheduler.snapshot()
        if not snapshot.tokens:
            return

        percent = self.accounting.progress_percent(snapshot.cursor, snapshot.total)
        try:
            self.documents.update_progress(self._document_id, percent)
        except StorageError:
            logger.warning("Could not save progress for %s", self._document_id)
            return
        self._saved_cursor = snapshot.cursor
        self._saved_percent = percent
