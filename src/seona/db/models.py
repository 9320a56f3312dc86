"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Column types are portable (no dialect-specific
JSONB/ARRAY) so the same schema runs on SQLite and PostgreSQL.

Key concepts:
- `options` is the key/value settings store (identifier, verification token)
- `posts` is the content repository; `post_meta` holds the ownership tag
- `attachments` backs uploaded thumbnails
- `users` is the read-only user directory
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ══════════════════════════════════════════════════════════════
# Settings store
# ══════════════════════════════════════════════════════════════


class Option(Base):
    """A named site option. Values are opaque strings."""

    __tablename__ = "options"

    name: Mapped[str] = mapped_column(String(191), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")


# ══════════════════════════════════════════════════════════════
# Content repository
# ══════════════════════════════════════════════════════════════


class Attachment(Base):
    """A stored media file (e.g. a post thumbnail)."""

    __tablename__ = "attachments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    path: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )


class User(Base):
    """A site user. Managed outside this service; listed read-only."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    login: Mapped[str] = mapped_column(String(60), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    display_name: Mapped[str] = mapped_column(String(250), nullable=False, default="")
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="subscriber")
    registered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )


class Post(Base):
    """A content item.

    Learn: Posts can be created by anything with database access. Only
    posts carrying the ownership tag in post_meta are visible to the
    sync protocol.
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    excerpt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")
    slug: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    post_type: Mapped[str] = mapped_column(String(20), nullable=False, default="post")
    author_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    thumbnail_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("attachments.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


class PostMeta(Base):
    """Key/value metadata attached to a post (one value per key)."""

    __tablename__ = "post_meta"
    __table_args__ = (
        UniqueConstraint("post_id", "meta_key", name="uq_post_meta_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    meta_key: Mapped[str] = mapped_column(String(191), nullable=False)
    meta_value: Mapped[str] = mapped_column(Text, nullable=False, default="")

