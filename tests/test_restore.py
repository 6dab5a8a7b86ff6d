"""Tests for the restore engine and the history read side."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import update

from src.errors import NotFoundError, ValidationFailure
from src.models import ContentHistory
from src.models.enums import EntityType
from src.versioning.history import history_recorder
from src.versioning.restore import parse_version, restore_engine
from src.versioning.store import blog_post_store, page_store


async def _page_with_revisions(db, actor, revisions: int):
    """Page 'doc' at version 1 + revisions; version v has data {"rev": v}."""
    page = await page_store.create(db, {"slug": "doc", "title": "Doc", "data": {"rev": 1}}, actor)
    for v in range(2, revisions + 2):
        page = await page_store.update(db, "doc", {"data": {"rev": v}}, actor)
    return page


# ── parse_version ────────────────────────────────────────────────────


class TestParseVersion:
    @pytest.mark.parametrize("value,expected", [(3, 3), ("3", 3), (" 12 ", 12)])
    def test_valid(self, value, expected):
        assert parse_version(value) == expected

    @pytest.mark.parametrize("value", ["abc", "1.5", "", "-2", 0, -1, True, None, 2.0])
    def test_invalid(self, value):
        with pytest.raises(ValidationFailure, match="Version must be a valid number"):
            parse_version(value)


# ── restore ──────────────────────────────────────────────────────────


class TestRestore:
    """Test RestoreEngine.restore."""

    @pytest.mark.asyncio
    async def test_restore_after_five_edits(self, db, editor):
        """v6 restored to v2 → v7 with v2 content; v6 content captured as history."""
        page = await _page_with_revisions(db, editor, 5)
        assert page.version == 6
        assert await history_recorder.count(db, EntityType.PAGE, page.id) == 5

        restored, from_version = await restore_engine.restore(db, "page", "doc", 2, editor)

        assert from_version == 2
        assert restored.version == 7
        assert restored.data == {"rev": 2}
        assert await history_recorder.count(db, EntityType.PAGE, page.id) == 6
        entry = await history_recorder.get_entry(db, EntityType.PAGE, page.id, 6)
        assert entry.content_snapshot == {"rev": 6}
        assert entry.change_summary == "Restored to version 2"

    @pytest.mark.asyncio
    async def test_restored_fields_match_snapshot(self, db, editor, reviewer):
        """v8 restored to v3 → title/content/meta/status equal v3 snapshot, version 9."""
        await page_store.create(db, {"slug": "doc", "title": "T1", "data": {"n": 1}}, editor)
        for n in range(2, 9):
            patch = {"title": f"T{n}", "data": {"n": n}, "meta_data": {"m": n}}
            if n == 4:
                patch["status"] = "review"
            await page_store.update(db, "doc", patch, editor)

        restored, _ = await restore_engine.restore(db, EntityType.PAGE, "doc", "3", reviewer)

        snapshot = await history_recorder.get_entry(db, EntityType.PAGE, restored.id, 3)
        assert restored.version == 9
        assert restored.title == snapshot.title == "T3"
        assert restored.data == snapshot.content_snapshot == {"n": 3}
        assert restored.meta_data == snapshot.meta_snapshot == {"m": 3}
        assert restored.status == snapshot.status == "draft"
        assert restored.last_modified_by == reviewer.id

    @pytest.mark.asyncio
    async def test_restore_to_current_version_is_noop(self, db, editor):
        page = await _page_with_revisions(db, editor, 3)

        restored, _ = await restore_engine.restore(db, "page", "doc", page.version, editor)

        assert restored.version == 4
        assert await history_recorder.count(db, EntityType.PAGE, page.id) == 3

    @pytest.mark.asyncio
    async def test_unknown_version_is_not_found(self, db, editor):
        await _page_with_revisions(db, editor, 5)

        with pytest.raises(NotFoundError, match="version 99"):
            await restore_engine.restore(db, "page", "doc", 99, editor)

    @pytest.mark.asyncio
    async def test_non_numeric_version(self, db, editor):
        await _page_with_revisions(db, editor, 1)
        with pytest.raises(ValidationFailure, match="valid number"):
            await restore_engine.restore(db, "page", "doc", "abc", editor)

    @pytest.mark.asyncio
    async def test_unknown_slug(self, db, editor):
        with pytest.raises(NotFoundError):
            await restore_engine.restore(db, "page", "missing", 1, editor)

    @pytest.mark.asyncio
    async def test_unknown_entity_type(self, db, editor):
        with pytest.raises(ValidationFailure):
            await restore_engine.restore(db, "widget", "doc", 1, editor)

    @pytest.mark.asyncio
    async def test_restore_blog_post_document(self, db, editor):
        await blog_post_store.create(
            db,
            {"slug": "p", "title": "P", "content": {"v": 1}, "excerpt": "e1", "tags": ["x"], "category": "c1"},
            editor,
        )
        await blog_post_store.update(
            db, "p", {"content": {"v": 2}, "excerpt": "e2", "tags": ["y"], "category": "c2"}, editor
        )

        post, _ = await restore_engine.restore(db, "blog_post", "p", 1, editor)

        assert post.version == 3
        assert post.content == {"v": 1}
        assert post.excerpt == "e1"
        assert post.tags == ["x"]
        assert post.category == "c1"

    @pytest.mark.asyncio
    async def test_restoring_published_version_restamps(self, db, editor):
        await page_store.create(db, {"slug": "doc", "title": "Doc"}, editor)
        await page_store.update(db, "doc", {"status": "published"}, editor)
        page = await page_store.update(db, "doc", {"status": "archived"}, editor)
        assert page.published_at is None

        page, _ = await restore_engine.restore(db, "page", "doc", 2, editor)

        assert page.status == "published"
        assert page.published_at is not None


# ── History read side ────────────────────────────────────────────────


class TestHistoryQueries:
    """Test HistoryRecorder read methods."""

    @pytest.mark.asyncio
    async def test_newest_first_with_limit(self, db, editor):
        page = await _page_with_revisions(db, editor, 4)

        history = await history_recorder.get_history(db, "page", page.id, limit=2)

        assert [h.version for h in history] == [4, 3]

    @pytest.mark.asyncio
    async def test_changer_profile_joined(self, db, profiled_actor):
        page = await _page_with_revisions(db, profiled_actor, 1)

        (entry,) = await history_recorder.get_history(db, "page", page.id)

        assert entry.changed_by == profiled_actor.id
        assert entry.changed_by_email == "profile@example.com"
        assert entry.changed_by_name == "Pat Profile"

    @pytest.mark.asyncio
    async def test_unknown_changer_has_no_profile(self, db, editor):
        page = await _page_with_revisions(db, editor, 1)
        (entry,) = await history_recorder.get_history(db, "page", page.id)
        assert entry.changed_by_email is None

    @pytest.mark.asyncio
    async def test_invalid_limit(self, db, editor):
        page = await _page_with_revisions(db, editor, 1)
        with pytest.raises(ValidationFailure):
            await history_recorder.get_history(db, "page", page.id, limit=0)

    @pytest.mark.asyncio
    async def test_recent_changes_window(self, db, editor):
        page = await _page_with_revisions(db, editor, 2)
        await db.execute(
            update(ContentHistory)
            .where(ContentHistory.version == 1)
            .values(created_at=datetime.now(UTC) - timedelta(days=10))
            .execution_options(synchronize_session=False)
        )

        recent = await history_recorder.recent_changes(db, days=7)

        assert [(h.record_id, h.version) for h in recent] == [(page.id, 2)]

    @pytest.mark.asyncio
    async def test_history_is_per_entity_type(self, db, editor):
        page = await _page_with_revisions(db, editor, 1)
        assert await history_recorder.count(db, "blog_post", page.id) == 0
