"""Tests for the versioned record store — create/update/delete of pages and posts."""

from __future__ import annotations

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.dialects import postgresql

from src.errors import ConflictError, NotFoundError, ValidationFailure
from src.models import AuditLog, BlogPost, ContentHistory, Page
from src.models.enums import EntityType
from src.versioning.history import history_recorder
from src.versioning.store import blog_post_store, get_store, page_store


# ── Helpers ──────────────────────────────────────────────────────────


async def _count(db, model, **filters) -> int:
    query = select(func.count()).select_from(model)
    for field, value in filters.items():
        query = query.where(getattr(model, field) == value)
    result = await db.execute(query)
    return result.scalar() or 0


async def _make_page(db, actor, slug="home", title="Home", **extra):
    return await page_store.create(db, {"slug": slug, "title": title, **extra}, actor)


# ── create ───────────────────────────────────────────────────────────


class TestCreate:
    """Test VersionedRecordStore.create."""

    @pytest.mark.asyncio
    async def test_new_page_starts_as_draft_v1(self, db, editor):
        page = await _make_page(db, editor, data={"blocks": [{"type": "hero"}]})

        assert page.version == 1
        assert page.status == "draft"
        assert page.author_id == editor.id
        assert page.last_modified_by == editor.id
        assert page.data == {"blocks": [{"type": "hero"}]}
        assert page.published_at is None

    @pytest.mark.asyncio
    async def test_create_writes_insert_audit_row(self, db, editor):
        page = await _make_page(db, editor)

        result = await db.execute(select(AuditLog).where(AuditLog.record_id == page.id))
        entries = result.scalars().all()
        assert len(entries) == 1
        assert entries[0].action == "INSERT"
        assert entries[0].table_name == "content_pages"
        assert entries[0].old_values is None
        assert entries[0].new_values["slug"] == "home"
        assert entries[0].user_email == "editor@example.com"
        assert entries[0].ip_address == "10.0.0.1"

    @pytest.mark.asyncio
    async def test_create_writes_no_history(self, db, editor):
        await _make_page(db, editor)
        assert await _count(db, ContentHistory) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("data", [{"slug": "x"}, {"title": "X"}, {"slug": "", "title": "X"}])
    async def test_missing_title_or_slug_rejected(self, db, editor, data):
        with pytest.raises(ValidationFailure):
            await page_store.create(db, data, editor)
        assert await _count(db, Page) == 0

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, db, editor):
        with pytest.raises(ValidationFailure) as exc_info:
            await page_store.create(db, {"slug": "a", "title": "A", "version": 7}, editor)
        assert exc_info.value.field == "version"

    @pytest.mark.asyncio
    async def test_duplicate_slug_conflicts_and_leaves_one_entity(self, db, editor, reviewer):
        await _make_page(db, editor, slug="about", title="About")

        with pytest.raises(ConflictError) as exc_info:
            await _make_page(db, reviewer, slug="about", title="About us")

        assert exc_info.value.field == "slug"
        assert await _count(db, Page, slug="about") == 1
        page = await page_store.find_by_slug(db, "about")
        assert page.title == "About"

    @pytest.mark.asyncio
    async def test_same_slug_allowed_across_types(self, db, editor):
        await _make_page(db, editor, slug="news", title="News")
        post = await blog_post_store.create(db, {"slug": "news", "title": "News post"}, editor)
        assert post.version == 1

    @pytest.mark.asyncio
    async def test_input_documents_are_copied(self, db, editor):
        data = {"blocks": ["a"]}
        page = await _make_page(db, editor, data=data)
        data["blocks"].append("b")
        assert page.data == {"blocks": ["a"]}


# ── update ───────────────────────────────────────────────────────────


class TestUpdate:
    """Test VersionedRecordStore.update — versioning and history capture."""

    @pytest.mark.asyncio
    async def test_home_page_title_edits(self, db, editor):
        """Create → rename → rename to same value: v1 → v2 → v2, one history row."""
        page = await _make_page(db, editor)
        assert page.version == 1

        page = await page_store.update(db, "home", {"title": "Home Page"}, editor)
        assert page.version == 2
        history = await history_recorder.get_history(db, EntityType.PAGE, page.id)
        assert [(h.version, h.title) for h in history] == [(1, "Home")]

        page = await page_store.update(db, "home", {"title": "Home Page"}, editor)
        assert page.version == 2
        assert await history_recorder.count(db, EntityType.PAGE, page.id) == 1

    @pytest.mark.asyncio
    async def test_n_changes_give_version_n_plus_one(self, db, editor):
        page = await _make_page(db, editor)
        for i in range(1, 8):
            await page_store.update(db, "home", {"data": {"rev": i}}, editor)

        page = await page_store.find_by_slug(db, "home")
        assert page.version == 8
        result = await db.execute(
            select(ContentHistory.version).where(ContentHistory.record_id == page.id)
        )
        assert sorted(result.scalars().all()) == list(range(1, 8))

    @pytest.mark.asyncio
    async def test_identical_patch_is_noop(self, db, editor):
        page = await _make_page(db, editor, data={"a": 1}, meta_data={"seo": "x"})

        page = await page_store.update(
            db, "home", {"title": "Home", "data": {"a": 1}, "meta_data": {"seo": "x"}, "status": "draft"}, editor
        )

        assert page.version == 1
        assert await _count(db, ContentHistory) == 0
        assert await _count(db, AuditLog, action="UPDATE") == 0

    @pytest.mark.asyncio
    async def test_snapshot_holds_old_values_and_superseding_actor(self, db, editor, reviewer):
        await _make_page(db, editor, data={"body": "old"}, meta_data={"k": 1})

        page = await page_store.update(
            db, "home", {"data": {"body": "new"}}, reviewer, change_summary="copy edit"
        )

        entry = await history_recorder.get_entry(db, EntityType.PAGE, page.id, 1)
        assert entry.content_snapshot == {"body": "old"}
        assert entry.meta_snapshot == {"k": 1}
        assert entry.title == "Home"
        assert entry.status == "draft"
        assert entry.changed_by == reviewer.id
        assert entry.change_summary == "copy edit"
        assert page.last_modified_by == reviewer.id
        assert page.author_id == editor.id

    @pytest.mark.asyncio
    async def test_untracked_field_does_not_bump_version(self, db, editor):
        await _make_page(db, editor)

        page = await page_store.update(db, "home", {"order_index": 5}, editor)

        assert page.version == 1
        assert page.order_index == 5
        assert await _count(db, ContentHistory) == 0
        # The column change is still audited
        result = await db.execute(select(AuditLog).where(AuditLog.action == "UPDATE"))
        assert result.scalar_one().changed_fields == ["order_index"]

    @pytest.mark.asyncio
    async def test_empty_patch_rejected(self, db, editor):
        await _make_page(db, editor)
        with pytest.raises(ValidationFailure, match="At least one field"):
            await page_store.update(db, "home", {}, editor)

    @pytest.mark.asyncio
    async def test_invalid_status_rejected_without_side_effects(self, db, editor):
        await _make_page(db, editor)

        with pytest.raises(ValidationFailure) as exc_info:
            await page_store.update(db, "home", {"title": "New", "status": "live"}, editor)

        assert exc_info.value.field == "status"
        page = await page_store.find_by_slug(db, "home")
        assert page.version == 1
        assert page.title == "Home"

    @pytest.mark.asyncio
    async def test_null_for_required_column_rejected(self, db, editor):
        await _make_page(db, editor)
        with pytest.raises(ValidationFailure):
            await page_store.update(db, "home", {"data": None}, editor)

    @pytest.mark.asyncio
    async def test_missing_slug_is_not_found(self, db, editor):
        with pytest.raises(NotFoundError, match="'ghost'"):
            await page_store.update(db, "ghost", {"title": "Boo"}, editor)

    @pytest.mark.asyncio
    async def test_slug_collision_leaves_version_and_history_untouched(self, db, editor):
        await _make_page(db, editor, slug="a", title="A")
        await _make_page(db, editor, slug="b", title="B")

        with pytest.raises(ConflictError):
            await page_store.update(db, "b", {"slug": "a", "title": "B2"}, editor)

        page = await page_store.find_by_slug(db, "b")
        assert page.version == 1
        assert page.title == "B"
        assert await _count(db, ContentHistory) == 0

    @pytest.mark.asyncio
    async def test_slug_rename(self, db, editor):
        await _make_page(db, editor, slug="old", title="Old")

        page = await page_store.update(db, "old", {"slug": "new"}, editor)

        assert page.slug == "new"
        assert page.version == 1
        with pytest.raises(NotFoundError):
            await page_store.find_by_slug(db, "old")

    @pytest.mark.asyncio
    async def test_stale_expected_version_conflicts(self, db, editor, reviewer):
        await _make_page(db, editor)
        await page_store.update(db, "home", {"title": "Mine"}, editor, expected_version=1)

        with pytest.raises(ConflictError, match="version 2"):
            await page_store.update(db, "home", {"title": "Theirs"}, reviewer, expected_version=1)

        page = await page_store.find_by_slug(db, "home")
        assert page.title == "Mine"
        assert page.version == 2

    @pytest.mark.asyncio
    async def test_without_expected_version_last_write_wins(self, db, editor, reviewer):
        await _make_page(db, editor)
        await page_store.update(db, "home", {"title": "Mine"}, editor)
        page = await page_store.update(db, "home", {"title": "Theirs"}, reviewer)
        assert page.title == "Theirs"
        assert page.version == 3

    @pytest.mark.asyncio
    async def test_update_locks_the_row(self, db, editor):
        await _make_page(db, editor)
        statements = []

        def capture(state):
            statements.append(str(state.statement.compile(dialect=postgresql.dialect())))

        event.listen(db.sync_session, "do_orm_execute", capture)
        try:
            await page_store.update(db, "home", {"title": "Locked"}, editor)
        finally:
            event.remove(db.sync_session, "do_orm_execute", capture)

        assert any("FOR UPDATE" in sql for sql in statements)

    @pytest.mark.asyncio
    async def test_already_captured_version_is_a_version_conflict(self, db, editor):
        page = await _make_page(db, editor)
        # Another writer already recorded version 1 of this page
        db.add(
            ContentHistory(
                entity_type=EntityType.PAGE.value,
                record_id=page.id,
                version=1,
                title="Home",
                content_snapshot={},
            )
        )
        await db.flush()

        with pytest.raises(ConflictError) as exc_info:
            await page_store.update(db, "home", {"title": "Late"}, editor)

        assert exc_info.value.field == "version"
        assert "modified concurrently" in exc_info.value.message


# ── Status & publish timestamp ───────────────────────────────────────


class TestStatusChanges:
    """published_at follows entering/leaving the published status."""

    @pytest.mark.asyncio
    async def test_publishing_stamps_published_at(self, db, editor):
        await _make_page(db, editor)
        page = await page_store.update(db, "home", {"status": "published"}, editor)
        assert page.published_at is not None
        assert page.version == 2

    @pytest.mark.asyncio
    async def test_republishing_keeps_first_timestamp(self, db, editor):
        await _make_page(db, editor)
        page = await page_store.update(db, "home", {"status": "published"}, editor)
        first = page.published_at
        page = await page_store.update(db, "home", {"title": "Home v2"}, editor)
        assert page.published_at == first

    @pytest.mark.asyncio
    async def test_archiving_clears_published_at(self, db, editor):
        await blog_post_store.create(db, {"slug": "p", "title": "P"}, editor)
        await blog_post_store.update(db, "p", {"status": "published"}, editor)
        post = await blog_post_store.update(db, "p", {"status": "archived"}, editor)
        assert post.published_at is None

    @pytest.mark.asyncio
    async def test_any_transition_allowed(self, db, editor):
        await _make_page(db, editor)
        for status in ("archived", "review", "draft", "scheduled", "published", "draft"):
            page = await page_store.update(db, "home", {"status": status}, editor)
            assert page.status == status


# ── Blog posts ───────────────────────────────────────────────────────


class TestBlogPosts:
    """Blog-specific tracked fields and snapshot document."""

    @pytest.mark.asyncio
    async def test_excerpt_is_tracked(self, db, editor):
        await blog_post_store.create(db, {"slug": "p", "title": "P", "excerpt": "one"}, editor)
        post = await blog_post_store.update(db, "p", {"excerpt": "two"}, editor)
        assert post.version == 2

    @pytest.mark.asyncio
    async def test_tags_alone_are_not_tracked(self, db, editor):
        await blog_post_store.create(db, {"slug": "p", "title": "P"}, editor)
        post = await blog_post_store.update(db, "p", {"tags": ["python"]}, editor)
        assert post.version == 1
        assert post.tags == ["python"]

    @pytest.mark.asyncio
    async def test_snapshot_contains_post_document(self, db, editor):
        await blog_post_store.create(
            db,
            {
                "slug": "p",
                "title": "P",
                "content": {"html": "<p>v1</p>"},
                "excerpt": "e1",
                "tags": ["a"],
                "category": "news",
                "featured_image": "img/1.png",
            },
            editor,
        )
        post = await blog_post_store.update(db, "p", {"content": {"html": "<p>v2</p>"}}, editor)

        entry = await history_recorder.get_entry(db, EntityType.BLOG_POST, post.id, 1)
        assert entry.content_snapshot == {
            "content": {"html": "<p>v1</p>"},
            "excerpt": "e1",
            "featured_image": "img/1.png",
            "tags": ["a"],
            "category": "news",
        }

    @pytest.mark.asyncio
    async def test_list_filters_by_status(self, db, editor):
        await blog_post_store.create(db, {"slug": "a", "title": "A"}, editor)
        await blog_post_store.create(db, {"slug": "b", "title": "B"}, editor)
        await blog_post_store.update(db, "b", {"status": "published"}, editor)

        published = await blog_post_store.list(db, status="published")
        assert [p.slug for p in published] == ["b"]
        assert len(await blog_post_store.list(db)) == 2

    @pytest.mark.asyncio
    async def test_list_filters_by_category_and_tag(self, db, editor):
        await blog_post_store.create(db, {"slug": "a", "title": "A", "category": "news", "tags": ["python"]}, editor)
        await blog_post_store.create(db, {"slug": "b", "title": "B", "category": "news", "tags": ["go"]}, editor)
        await blog_post_store.create(db, {"slug": "c", "title": "C", "category": "guides", "tags": ["python-tips"]}, editor)

        by_category = await blog_post_store.list(db, category="news")
        assert sorted(p.slug for p in by_category) == ["a", "b"]

        # Whole-element match: "python" does not match "python-tips"
        by_tag = await blog_post_store.list(db, tag="python")
        assert [p.slug for p in by_tag] == ["a"]

        assert await blog_post_store.list(db, category="guides", tag="python") == []

    @pytest.mark.asyncio
    async def test_pages_reject_blog_filters(self, db):
        with pytest.raises(ValidationFailure):
            await page_store.list(db, category="news")


# ── delete ───────────────────────────────────────────────────────────


class TestDelete:
    """Test VersionedRecordStore.delete_by_slug."""

    @pytest.mark.asyncio
    async def test_history_survives_deletion(self, db, editor):
        page = await _make_page(db, editor)
        await page_store.update(db, "home", {"title": "Home 2"}, editor)
        await page_store.update(db, "home", {"title": "Home 3"}, editor)
        record_id = page.id

        await page_store.delete_by_slug(db, "home", editor)

        history = await history_recorder.get_history(db, EntityType.PAGE, record_id)
        assert [h.version for h in history] == [2, 1]
        with pytest.raises(NotFoundError):
            await page_store.find_by_slug(db, "home")

    @pytest.mark.asyncio
    async def test_delete_writes_delete_audit_row(self, db, editor):
        page = await _make_page(db, editor)
        record_id = page.id

        await page_store.delete_by_slug(db, "home", editor)

        result = await db.execute(
            select(AuditLog).where(AuditLog.record_id == record_id, AuditLog.action == "DELETE")
        )
        entry = result.scalar_one()
        assert entry.old_values["title"] == "Home"
        assert entry.new_values is None
        assert entry.changed_fields is None

    @pytest.mark.asyncio
    async def test_delete_missing_is_not_found(self, db, editor):
        with pytest.raises(NotFoundError):
            await blog_post_store.delete_by_slug(db, "nope", editor)
        assert await _count(db, BlogPost) == 0


class TestGetStore:
    def test_resolves_by_name(self):
        assert get_store("page") is page_store
        assert get_store(EntityType.BLOG_POST) is blog_post_store

    def test_unknown_type(self):
        with pytest.raises(ValidationFailure):
            get_store("widget")


class TestAppendOnlyTables:
    """History and audit rows are never updated, so they carry no updated_at."""

    def test_history_has_no_updated_at(self):
        assert "updated_at" not in ContentHistory.__table__.c
        assert "created_at" in ContentHistory.__table__.c

    def test_audit_log_has_no_updated_at(self):
        assert "updated_at" not in AuditLog.__table__.c

    def test_content_tables_keep_updated_at(self):
        assert "updated_at" in Page.__table__.c
        assert "updated_at" in BlogPost.__table__.c
