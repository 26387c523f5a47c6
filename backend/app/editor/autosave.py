"""Debounced autosave for editor sessions."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from backend.app.models.document import BubbleDoc, CarouselDoc, FolderDoc
from backend.app.models.validation import ValidationReport
from backend.app.utils.logging import StructuredEventLogger
from backend.app.utils.metrics import PrometheusFlexMetrics
from backend.app.validation.validator import validate_document

logger = logging.getLogger(__name__)

Doc = BubbleDoc | CarouselDoc | FolderDoc
SaveFn = Callable[[str, Doc], Awaitable[None]]


class SaveScheduler(Protocol):
    """Anything that can queue a document for saving."""

    def schedule(self, doc_id: str, doc: Doc) -> None:
        ...


class DebouncedSaver:
    """Saves a document once edits have been quiet for ``quiet_ms``.

    Each document has at most one pending timer; scheduling again restarts it.
    A save that is already running is never cancelled; the next save for the
    same document starts only after it finishes. Saves that time out or
    fail are logged and recorded, not raised.
    """

    def __init__(
        self,
        save_fn: SaveFn,
        quiet_ms: int = 800,
        timeout_s: float = 8.0,
        event_logger: StructuredEventLogger | None = None,
        metrics: PrometheusFlexMetrics | None = None,
    ) -> None:
        self._save_fn = save_fn
        self._quiet_s = quiet_ms / 1000
        self._timeout_s = timeout_s
        self._events = event_logger or StructuredEventLogger()
        self._metrics = metrics or PrometheusFlexMetrics()
        self._pending: dict[str, asyncio.Task[None]] = {}
        self._latest: dict[str, Doc] = {}
        # One save in flight per document; a newer save waits its turn
        self._save_locks: dict[str, asyncio.Lock] = {}
        self.last_outcome: dict[str, str] = {}

    def schedule(self, doc_id: str, doc: Doc) -> None:
        """Queue ``doc`` for saving, restarting the quiet timer.

        Must be called from a running event loop.
        """
        self._latest[doc_id] = doc
        previous = self._pending.pop(doc_id, None)
        if previous is not None:
            previous.cancel()
        self._pending[doc_id] = asyncio.get_running_loop().create_task(self._save_after_quiet(doc_id))

    def is_pending(self, doc_id: str) -> bool:
        return doc_id in self._pending

    async def flush(self, doc_id: str | None = None) -> None:
        """Save now instead of waiting, for one document or all of them."""
        doc_ids = [doc_id] if doc_id is not None else list(self._latest)
        for target in doc_ids:
            task = self._pending.pop(target, None)
            if task is not None:
                task.cancel()
            await self._save(target)

    async def _save_after_quiet(self, doc_id: str) -> None:
        await asyncio.sleep(self._quiet_s)
        self._pending.pop(doc_id, None)
        await self._save(doc_id)

    async def _save(self, doc_id: str) -> None:
        lock = self._save_locks.setdefault(doc_id, asyncio.Lock())
        async with lock:
            await self._save_latest(doc_id)

    async def _save_latest(self, doc_id: str) -> None:
        doc = self._latest.pop(doc_id, None)
        if doc is None:
            return

        error_reason = None
        try:
            await asyncio.wait_for(self._save_fn(doc_id, doc), timeout=self._timeout_s)
            outcome = "saved"
        except asyncio.TimeoutError:
            outcome = "timeout"
            error_reason = f"save exceeded {self._timeout_s}s"
        except Exception as e:
            logger.exception("Autosave failed for %s", doc_id)
            outcome = "error"
            error_reason = str(e)

        self.last_outcome[doc_id] = outcome
        self._events.log_autosave(doc_id, outcome, error_reason=error_reason)
        self._metrics.inc_autosave(outcome)


class EditorSession:
    """One open document: every mutation is revalidated, then autosaved."""

    def __init__(self, doc_id: str, doc: Doc, scheduler: SaveScheduler) -> None:
        self.doc_id = doc_id
        self.doc = doc
        self.report = validate_document(doc)
        self._scheduler = scheduler

    def apply(self, mutate: Callable[[Doc], Doc]) -> ValidationReport:
        """Apply a mutation and return the fresh validation report.

        Args:
            mutate: Function returning the edited document

        Returns:
            Report for the edited document
        """
        self.doc = mutate(self.doc)
        self.report = validate_document(self.doc)
        self._scheduler.schedule(self.doc_id, self.doc)
        return self.report
