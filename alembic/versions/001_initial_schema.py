"""Initial schema — content, history, audit and catalog tables.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""
from __future__ import annotations

from typing import Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, tuple[str, ...], None] = None
depends_on: Union[str, tuple[str, ...], None] = None


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _created_columns() -> list[sa.Column]:
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _versioned_columns() -> list[sa.Column]:
    return [
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("meta_data", postgresql.JSONB(astext_type=sa.Text())),
        sa.Column("status", sa.String(20), server_default="draft", nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("author_id", postgresql.UUID(as_uuid=True)),
        sa.Column("last_modified_by", postgresql.UUID(as_uuid=True)),
        sa.Column("published_at", sa.DateTime(timezone=True)),
    ]


def upgrade() -> None:
    # ── Users ──────────────────────────────────────────────────────────

    op.create_table(
        "users",
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(200)),
        sa.Column("role", sa.String(20), server_default="viewer", nullable=False),
        sa.Column("avatar_url", sa.String(1000)),
        *_base_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ── Versioned content ──────────────────────────────────────────────

    op.create_table(
        "content_pages",
        *_versioned_columns(),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column("order_index", sa.Integer(), server_default="0", nullable=False),
        *_base_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_content_pages_slug", "content_pages", ["slug"], unique=True)
    op.create_index("ix_content_pages_status", "content_pages", ["status"])
    op.create_index("ix_content_pages_order_index", "content_pages", ["order_index"])
    op.create_index("ix_content_pages_author_id", "content_pages", ["author_id"])
    op.create_index("ix_content_pages_last_modified_by", "content_pages", ["last_modified_by"])

    op.create_table(
        "blog_posts",
        *_versioned_columns(),
        sa.Column("content", postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column("excerpt", sa.Text()),
        sa.Column("featured_image", sa.String(1000)),
        sa.Column("tags", postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'[]'::jsonb"), nullable=False),
        sa.Column("category", sa.String(100)),
        sa.Column("scheduled_at", sa.DateTime(timezone=True)),
        sa.Column("view_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("reading_time_minutes", sa.Integer()),
        *_base_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_blog_posts_slug", "blog_posts", ["slug"], unique=True)
    op.create_index("ix_blog_posts_status", "blog_posts", ["status"])
    op.create_index("ix_blog_posts_category", "blog_posts", ["category"])
    op.create_index("ix_blog_posts_author_id", "blog_posts", ["author_id"])
    op.create_index("ix_blog_posts_last_modified_by", "blog_posts", ["last_modified_by"])

    # ── History & audit (no FKs: rows outlive the records they describe) ──

    op.create_table(
        "content_history",
        sa.Column("entity_type", sa.String(30), nullable=False, comment="page, blog_post"),
        sa.Column("record_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(500)),
        sa.Column("content_snapshot", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("meta_snapshot", postgresql.JSONB(astext_type=sa.Text())),
        sa.Column("status", sa.String(20)),
        sa.Column("changed_by", postgresql.UUID(as_uuid=True)),
        sa.Column("change_summary", sa.Text()),
        *_created_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("entity_type", "record_id", "version", name="uq_content_history_version"),
    )
    op.create_index("idx_content_history_record", "content_history", ["entity_type", "record_id", "version"])
    op.create_index("idx_content_history_created", "content_history", ["created_at"])
    op.create_index("ix_content_history_changed_by", "content_history", ["changed_by"])

    op.create_table(
        "audit_log",
        sa.Column("table_name", sa.String(100), nullable=False),
        sa.Column("record_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("action", sa.String(10), nullable=False, comment="INSERT, UPDATE, DELETE"),
        sa.Column("user_id", postgresql.UUID(as_uuid=True)),
        sa.Column("user_email", sa.String(255)),
        sa.Column("old_values", postgresql.JSONB(astext_type=sa.Text()), comment="NULL for INSERT"),
        sa.Column("new_values", postgresql.JSONB(astext_type=sa.Text()), comment="NULL for DELETE"),
        sa.Column("changed_fields", postgresql.JSONB(astext_type=sa.Text()), comment="UPDATE only"),
        sa.Column("ip_address", sa.String(64)),
        sa.Column("user_agent", sa.String(500)),
        *_created_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_action", "audit_log", ["action"])
    op.create_index("idx_audit_log_table_record", "audit_log", ["table_name", "record_id", "created_at"])
    op.create_index("idx_audit_log_created", "audit_log", ["created_at"])
    op.create_index("idx_audit_log_user", "audit_log", ["user_id", "created_at"])

    # ── Catalog tables (audited, not versioned) ────────────────────────

    for table in ("blog_categories", "blog_tags"):
        op.create_table(
            table,
            sa.Column("name", sa.String(100), nullable=False),
            sa.Column("slug", sa.String(100), nullable=False),
            sa.Column("description", sa.Text()),
            *_base_columns(),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(f"ix_{table}_slug", table, ["slug"], unique=True)

    op.create_table(
        "media",
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("storage_path", sa.String(1000), nullable=False, comment="Object key in the bucket"),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column("size_bytes", sa.BigInteger(), server_default="0", nullable=False),
        sa.Column("alt_text", sa.String(500)),
        sa.Column("uploaded_by", postgresql.UUID(as_uuid=True)),
        *_base_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("storage_path"),
    )
    op.create_index("ix_media_uploaded_by", "media", ["uploaded_by"])

    op.create_table(
        "custom_codes",
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("position", sa.String(20), server_default="head", nullable=False),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column("active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("last_modified_by", postgresql.UUID(as_uuid=True)),
        *_base_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index("ix_custom_codes_active", "custom_codes", ["active"])

    op.create_table(
        "content_common",
        sa.Column("key", sa.String(100), nullable=False),
        sa.Column("title", sa.String(200), comment="Human-readable name for the admin UI"),
        sa.Column("description", sa.Text()),
        sa.Column("data", postgresql.JSONB(astext_type=sa.Text()), server_default=sa.text("'{}'::jsonb"), nullable=False),
        sa.Column("active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("last_modified_by", postgresql.UUID(as_uuid=True)),
        *_base_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_content_common_key", "content_common", ["key"], unique=True)


def downgrade() -> None:
    op.drop_table("content_common")
    op.drop_table("custom_codes")
    op.drop_table("media")
    op.drop_table("blog_tags")
    op.drop_table("blog_categories")
    op.drop_table("audit_log")
    op.drop_table("content_history")
    op.drop_table("blog_posts")
    op.drop_table("content_pages")
    op.drop_table("users")
