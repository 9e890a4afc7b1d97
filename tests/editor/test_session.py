"""Tests for EditingSession dirty tracking and publish behaviour."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from salon_cms.editor.session import EditingSession, PublishStatus
from salon_cms.exceptions import ConflictError, InvalidSectionError, PersistenceError, SessionError
from salon_cms.models.content import ContentSnapshot, MenuItem
from salon_cms.models.publish import PublishReceipt

FAQ_ONE = {"id": "1", "question": "Q1", "answer": "A1"}


@pytest.fixture
def publish_fn() -> AsyncMock:
    return AsyncMock(return_value=PublishReceipt(version="v2", sections=["menu", "gallery", "staff", "faq", "siteInfo"]))


@pytest.fixture
def session(publish_fn: AsyncMock) -> EditingSession:
    editing = EditingSession(publish_fn, session_id="s-1")
    editing.initialize(ContentSnapshot.empty())
    return editing


class TestLifecycle:
    """Test initialization rules."""

    def test_operations_require_initialize(self, publish_fn: AsyncMock) -> None:
        """Verify the session refuses edits before it has content."""
        editing = EditingSession(publish_fn)
        with pytest.raises(SessionError):
            editing.update_section("faq", [])
        with pytest.raises(SessionError):
            _ = editing.is_dirty

    def test_initialize_only_once(self, session: EditingSession) -> None:
        """Verify a second initialize is rejected."""
        with pytest.raises(SessionError):
            session.initialize(ContentSnapshot.empty())

    def test_fresh_session_flags(self, session: EditingSession) -> None:
        """Verify a new session is clean with nothing to undo or redo."""
        assert session.is_dirty is False
        assert session.can_undo is False
        assert session.can_redo is False
        assert session.is_saving is False

    def test_invalid_section_propagates(self, session: EditingSession) -> None:
        """Verify an unknown section is a contract violation."""
        with pytest.raises(InvalidSectionError):
            session.update_section("pricing", [])


class TestDirtyTracking:
    """Test structural dirty comparison against the baseline."""

    def test_edit_makes_session_dirty(self, session: EditingSession) -> None:
        """Verify a changed section marks the session dirty."""
        session.update_section("faq", [FAQ_ONE])
        assert session.is_dirty is True
        assert session.can_undo is True

    def test_reverting_to_equal_value_is_clean(self, session: EditingSession) -> None:
        """Verify an edit that restores the original value compares equal."""
        session.update_section("faq", [FAQ_ONE])
        session.update_section("faq", [])

        assert session.is_dirty is False
        assert session.can_undo is True

    def test_reverting_to_different_value_stays_dirty(self, session: EditingSession) -> None:
        """Verify an edit to another non-baseline value keeps the session dirty."""
        session.update_section("faq", [FAQ_ONE])
        session.update_section("faq", [{**FAQ_ONE, "answer": "A2"}])

        assert session.is_dirty is True

    def test_list_order_is_significant(self, publish_fn: AsyncMock, snapshot: ContentSnapshot) -> None:
        """Verify reordering a list counts as a change."""
        editing = EditingSession(publish_fn)
        editing.initialize(snapshot)

        editing.update_section("menu", list(reversed(snapshot.menu)))

        assert editing.is_dirty is True

    def test_undo_back_to_baseline_is_clean(self, session: EditingSession) -> None:
        """Verify undoing every edit returns to a clean session."""
        session.update_section("faq", [FAQ_ONE])
        session.undo()

        assert session.is_dirty is False
        assert session.can_redo is True


class TestScenario:
    """Session-level walk through of edit, undo, redo."""

    def test_faq_scenario(self, session: EditingSession) -> None:
        """Verify the documented FAQ scenario."""
        session.update_section("faq", [FAQ_ONE])
        assert session.can_undo is True
        assert session.is_dirty is True

        session.undo()
        assert session.present.faq == ()
        assert session.can_undo is False
        assert session.can_redo is True

        session.redo()
        assert [item.id for item in session.present.faq] == ["1"]

    def test_status_reports_depths(self, session: EditingSession) -> None:
        """Verify the status model mirrors the history."""
        session.update_section("faq", [FAQ_ONE])
        session.update_section("siteInfo", {"name": "Salon"})
        session.undo()

        status = session.status()

        assert status.session_id == "s-1"
        assert status.past_depth == 1
        assert status.future_depth == 1
        assert status.is_dirty is True
        assert status.last_error is None


class TestPublish:
    """Test the publish protocol from the session's side."""

    async def test_success_adopts_sent_snapshot_as_baseline(
        self, session: EditingSession, publish_fn: AsyncMock
    ) -> None:
        """Verify a successful publish clears dirtiness."""
        session.update_section("faq", [FAQ_ONE])
        sent = session.present

        outcome = await session.publish()

        assert outcome.status == PublishStatus.PUBLISHED
        assert outcome.snapshot == sent
        publish_fn.assert_awaited_once_with(sent, if_match=None)
        assert session.baseline == sent
        assert session.is_dirty is False
        assert session.is_saving is False

    async def test_history_survives_publish(self, session: EditingSession) -> None:
        """Verify undo still works after publishing."""
        session.update_section("faq", [FAQ_ONE])
        await session.publish()

        session.undo()

        assert session.present.faq == ()
        assert session.is_dirty is True

    async def test_failure_keeps_session_dirty(self, session: EditingSession, publish_fn: AsyncMock) -> None:
        """Verify a failed publish leaves baseline and edits untouched."""
        publish_fn.side_effect = PersistenceError("disk full")
        session.update_section("faq", [FAQ_ONE])
        present = session.present

        with pytest.raises(PersistenceError):
            await session.publish()

        assert session.is_dirty is True
        assert session.baseline == ContentSnapshot.empty()
        assert session.present == present
        assert session.is_saving is False
        assert session.status().last_error == "disk full"

    async def test_retry_after_failure(self, session: EditingSession, publish_fn: AsyncMock) -> None:
        """Verify the user can retry immediately after a failure."""
        publish_fn.side_effect = [PersistenceError("disk full"), PublishReceipt(version="v3")]
        session.update_section("faq", [FAQ_ONE])

        with pytest.raises(PersistenceError):
            await session.publish()
        outcome = await session.publish()

        assert outcome.status == PublishStatus.PUBLISHED
        assert session.is_dirty is False
        assert session.last_error is None

    async def test_publish_captures_point_in_time_snapshot(self) -> None:
        """Verify edits made while publish is in flight are not sent."""
        release = asyncio.Event()
        persisted: list[ContentSnapshot] = []

        async def slow_publish(snapshot: ContentSnapshot, *, if_match: str | None = None) -> PublishReceipt:
            await release.wait()
            persisted.append(snapshot)
            return PublishReceipt()

        editing = EditingSession(slow_publish)
        editing.initialize(ContentSnapshot.empty())
        editing.update_section("faq", [FAQ_ONE])
        sent = editing.present

        task = asyncio.create_task(editing.publish())
        await asyncio.sleep(0)
        assert editing.is_saving is True

        editing.update_section("menu", [MenuItem(id="late", category="Cut", name="Late", price=1)])
        release.set()
        await task

        assert persisted == [sent]
        assert editing.baseline == sent
        assert editing.is_dirty is True
        assert len(editing.present.menu) == 1

    async def test_concurrent_publish_is_skipped(self) -> None:
        """Verify a second publish while one is in flight is a no-op."""
        release = asyncio.Event()
        calls = 0

        async def slow_publish(snapshot: ContentSnapshot, *, if_match: str | None = None) -> PublishReceipt:
            nonlocal calls
            calls += 1
            await release.wait()
            return PublishReceipt()

        editing = EditingSession(slow_publish)
        editing.initialize(ContentSnapshot.empty())
        editing.update_section("faq", [FAQ_ONE])

        first = asyncio.create_task(editing.publish())
        await asyncio.sleep(0)
        second = await editing.publish()
        release.set()
        first_outcome = await first

        assert second.status == PublishStatus.SKIPPED
        assert first_outcome.status == PublishStatus.PUBLISHED
        assert calls == 1

    async def test_version_token_is_sent_and_advanced(self, publish_fn: AsyncMock) -> None:
        """Verify a versioned session publishes with if_match and adopts the new version."""
        editing = EditingSession(publish_fn)
        editing.initialize(ContentSnapshot.empty(), version="v1")
        editing.update_section("faq", [FAQ_ONE])

        outcome = await editing.publish()

        publish_fn.assert_awaited_once_with(editing.present, if_match="v1")
        assert outcome.version == "v2"
        assert editing.version == "v2"

    async def test_forced_publish_resolves_conflict(self, publish_fn: AsyncMock) -> None:
        """Verify a conflicted session can overwrite newer content without losing its edits."""
        publish_fn.side_effect = [ConflictError("v1", "v9"), ConflictError("v1", "v9"), PublishReceipt(version="v10")]
        editing = EditingSession(publish_fn)
        editing.initialize(ContentSnapshot.empty(), version="v1")
        editing.update_section("faq", [FAQ_ONE])
        edited = editing.present

        for _ in range(2):
            with pytest.raises(ConflictError):
                await editing.publish()
        assert editing.is_dirty is True
        assert editing.status().last_error is not None

        outcome = await editing.publish(force=True)

        assert publish_fn.await_args_list[-1].kwargs == {"if_match": None}
        assert outcome.status == PublishStatus.PUBLISHED
        assert outcome.snapshot == edited
        assert editing.version == "v10"
        assert editing.is_dirty is False
        assert editing.status().last_error is None


def test_dirty_sections_names_changed_sections(session: EditingSession) -> None:
    session.update_section("faq", [FAQ_ONE])
    session.update_section("siteInfo", {"name": "Hana"})

    assert session.dirty_sections() == ["faq", "siteInfo"]

    session.undo()
    session.undo()

    assert session.dirty_sections() == []
