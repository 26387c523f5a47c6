"""Unit tests for debounced autosave and editor sessions."""

import asyncio

import pytest

from backend.app.editor.autosave import DebouncedSaver, EditorSession
from backend.app.models import BubbleDoc, DocumentStatus, TitleText
from backend.app.templates.seeds import seed_bubble


class RecordingSaveFn:
    """Async save function that records what it was given."""

    def __init__(self, delay_s: float = 0.0, fail: bool = False) -> None:
        self.calls: list[tuple[str, BubbleDoc]] = []
        self._delay_s = delay_s
        self._fail = fail

    async def __call__(self, doc_id: str, doc: BubbleDoc) -> None:
        await asyncio.sleep(self._delay_s)
        if self._fail:
            raise RuntimeError("store unavailable")
        self.calls.append((doc_id, doc))


class RecordingScheduler:
    def __init__(self) -> None:
        self.scheduled: list[str] = []

    def schedule(self, doc_id: str, doc: BubbleDoc) -> None:
        self.scheduled.append(doc_id)


@pytest.mark.asyncio
async def test_rapid_edits_collapse_into_one_save() -> None:
    """Test that edits inside the quiet window produce a single save of the latest doc."""
    save_fn = RecordingSaveFn()
    saver = DebouncedSaver(save_fn, quiet_ms=20)

    for title in ("a", "ab", "abc"):
        saver.schedule("doc-1", BubbleDoc(title=title))
        await asyncio.sleep(0.005)

    assert saver.is_pending("doc-1")
    await asyncio.sleep(0.1)

    assert [doc.title for _, doc in save_fn.calls] == ["abc"]
    assert not saver.is_pending("doc-1")
    assert saver.last_outcome["doc-1"] == "saved"


@pytest.mark.asyncio
async def test_documents_debounced_independently() -> None:
    save_fn = RecordingSaveFn()
    saver = DebouncedSaver(save_fn, quiet_ms=10)

    saver.schedule("doc-1", BubbleDoc(title="one"))
    saver.schedule("doc-2", BubbleDoc(title="two"))
    await asyncio.sleep(0.1)

    assert sorted(doc_id for doc_id, _ in save_fn.calls) == ["doc-1", "doc-2"]


@pytest.mark.asyncio
async def test_flush_saves_immediately() -> None:
    """Test that flush saves without waiting and cancels the timer."""
    save_fn = RecordingSaveFn()
    saver = DebouncedSaver(save_fn, quiet_ms=10_000)

    saver.schedule("doc-1", BubbleDoc(title="now"))
    await saver.flush("doc-1")

    assert [doc.title for _, doc in save_fn.calls] == ["now"]
    assert not saver.is_pending("doc-1")

    # Nothing left to save
    await saver.flush()
    assert len(save_fn.calls) == 1


@pytest.mark.asyncio
async def test_timeout_recorded() -> None:
    """Test that a save exceeding the timeout is recorded, not raised."""
    saver = DebouncedSaver(RecordingSaveFn(delay_s=1.0), quiet_ms=10, timeout_s=0.05)

    saver.schedule("doc-1", BubbleDoc(title="slow"))
    await saver.flush("doc-1")

    assert saver.last_outcome["doc-1"] == "timeout"


@pytest.mark.asyncio
async def test_failure_recorded() -> None:
    saver = DebouncedSaver(RecordingSaveFn(fail=True), quiet_ms=10)

    saver.schedule("doc-1", BubbleDoc(title="x"))
    await saver.flush()

    assert saver.last_outcome["doc-1"] == "error"


class SlowFirstStore:
    """Store whose first write is slow, so a later write could overtake it."""

    def __init__(self, first_delay_s: float) -> None:
        self.persisted: dict[str, str] = {}
        self.order: list[str] = []
        self._first_delay_s = first_delay_s

    async def __call__(self, doc_id: str, doc: BubbleDoc) -> None:
        delay = self._first_delay_s if not self.order else 0.0
        self.order.append(doc.title)
        await asyncio.sleep(delay)
        self.persisted[doc_id] = doc.title


@pytest.mark.asyncio
async def test_newer_save_waits_for_running_save() -> None:
    """Test that an edit made during a slow save is persisted after it, not overwritten."""
    store = SlowFirstStore(first_delay_s=0.3)
    saver = DebouncedSaver(store, quiet_ms=10)

    saver.schedule("doc-1", BubbleDoc(title="v1"))
    await asyncio.sleep(0.05)
    saver.schedule("doc-1", BubbleDoc(title="v2"))
    await asyncio.sleep(0.5)

    assert store.order == ["v1", "v2"]
    assert store.persisted["doc-1"] == "v2"
    assert saver.last_outcome["doc-1"] == "saved"


def test_editor_session_revalidates_and_schedules() -> None:
    """Test that each mutation returns a fresh report and queues a save."""
    scheduler = RecordingScheduler()
    session = EditorSession("doc-1", seed_bubble(), scheduler)
    assert session.report.status == DocumentStatus.PUBLISHABLE

    def clear_title(doc: BubbleDoc) -> BubbleDoc:
        body = [TitleText(id="t", text="")] + list(doc.section.body[1:])
        return doc.model_copy(update={"section": doc.section.model_copy(update={"body": body})})

    report = session.apply(clear_title)

    assert report.status == DocumentStatus.DRAFT
    assert [e.path for e in report.errors] == ["section.body[0].text"]
    assert session.report is report
    assert scheduler.scheduled == ["doc-1"]
