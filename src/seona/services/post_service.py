"""Post sync service — ownership-scoped CRUD for Seona-managed posts.

Learn: Every post created here gets an ownership tag (a post_meta row
keyed by the namespace, value "1"). get/list/delete only ever act on
tagged posts, so content authored by anyone else stays invisible to
the Seona platform even if it guesses an id.

Upsert with a thumbnail runs in three phases:
1. store the uploaded file (failure → nothing else happens)
2. create or update the post
3. point the post's thumbnail_id at the stored attachment
Phases 2 and 3 share one transaction with the attachment row. If either
fails, the transaction is rolled back and the stored file removed, so
a failed upsert leaves no orphaned attachment behind.

Updates by id check the tag too unless settings.strict_update_ownership
is off; in that mode an existing untagged post can be overwritten (and
stays untagged).
"""

import re
from dataclasses import dataclass, fields as dataclass_fields
from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from seona.config import Settings
from seona.db.models import Attachment, Post, PostMeta
from seona.errors import (
    BadRequest,
    InternalFailure,
    InvalidArgument,
    MediaStorageError,
    NotFound,
    ThumbnailAssociationError,
)
from seona.services.media_service import MediaStore
from seona.services.rendering import render_content

logger = structlog.get_logger()

POST_STATUSES = ("draft", "publish", "pending", "private", "future")
OWNED = "1"

# Largest id a 64-bit INTEGER primary key can hold
MAX_POST_ID = 2**63 - 1


def slugify(title: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")[:200]


def _storable(post_id: int) -> bool:
    return 0 < post_id <= MAX_POST_ID


@dataclass
class PostFields:
    """Writable post fields. None means "not provided"."""
    title: Optional[str] = None
    body: Optional[str] = None
    excerpt: Optional[str] = None
    status: Optional[str] = None
    slug: Optional[str] = None

    def changes(self) -> dict:
        """Provided fields, keyed by Post column name."""
        columns = {"body": "content"}
        return {
            columns.get(f.name, f.name): getattr(self, f.name)
            for f in dataclass_fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass
class Upload:
    filename: Optional[str]
    content_type: Optional[str]
    data: bytes


@dataclass
class ManagedPost:
    """A tagged post plus the fields derived for API responses."""
    post: Post
    body: str
    thumbnail: Optional[str]
    permalink: Optional[str]


class PostSyncService:
    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings
        self.media = MediaStore(db, settings.media_dir, settings.media_url)

    @property
    def tag_key(self) -> str:
        return self.settings.namespace

    # ─── Ownership ──────────────────────────────────────

    async def is_owned(self, post_id: int) -> bool:
        if not _storable(post_id):
            return False
        result = await self.db.execute(
            select(PostMeta.meta_value).where(
                PostMeta.post_id == post_id,
                PostMeta.meta_key == self.tag_key,
            )
        )
        return result.scalars().first() == OWNED

    async def _load(self, post_id: int) -> Optional[Post]:
        """The post row, or None. Ids outside the key range never exist."""
        if not _storable(post_id):
            return None
        return await self.db.get(Post, post_id)

    async def _tag(self, post_id: int) -> None:
        if await self.is_owned(post_id):
            return
        self.db.add(PostMeta(post_id=post_id, meta_key=self.tag_key, meta_value=OWNED))
        await self.db.flush()

    # ─── Upsert ─────────────────────────────────────────

    async def upsert(
        self,
        fields: PostFields,
        post_id: Optional[int] = None,
        thumbnail: Optional[Upload] = None,
    ) -> Post:
        """Create a tagged post, or update post `post_id`. Returns the post."""
        if fields.status is not None and fields.status not in POST_STATUSES:
            raise BadRequest(f"Invalid post status '{fields.status}'", code="upsert-post")

        attachment = None
        if thumbnail is not None:
            try:
                attachment = await self.media.store(
                    thumbnail.filename, thumbnail.content_type, thumbnail.data
                )
            except MediaStorageError:
                await self.db.rollback()
                raise

        try:
            post = await self._write_post(fields, post_id)
            if attachment is not None:
                await self._associate_thumbnail(post, attachment)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self._abort(attachment)
            logger.error("posts.upsert_failed", post_id=post_id, error=str(e))
            raise InternalFailure("Unable to insert post", code="upsert-post") from e
        except Exception:
            await self._abort(attachment)
            raise

        logger.info(
            "posts.upserted",
            post_id=post.id,
            created=post_id is None,
            thumbnail_id=post.thumbnail_id,
        )
        return post

    async def _write_post(self, fields: PostFields, post_id: Optional[int]) -> Post:
        if post_id is None:
            if not fields.title and not fields.body:
                raise BadRequest("Post title or body is required", code="upsert-post")
            post = Post(
                title=fields.title or "",
                content=fields.body or "",
                excerpt=fields.excerpt or "",
                status=fields.status or "draft",
                slug=fields.slug or slugify(fields.title or ""),
            )
            self.db.add(post)
            await self.db.flush()
            await self._tag(post.id)
            return post

        post = await self._load(post_id)
        if post is None:
            raise NotFound("Unable to retrieve post", code="upsert-post")
        if self.settings.strict_update_ownership and not await self.is_owned(post_id):
            raise NotFound("Unable to retrieve post", code="upsert-post")

        for column, value in fields.changes().items():
            setattr(post, column, value)
        await self.db.flush()
        return post

    async def _associate_thumbnail(self, post: Post, attachment: Attachment) -> None:
        stored = await self.db.get(Attachment, attachment.id)
        if stored is None:
            raise ThumbnailAssociationError()
        post.thumbnail_id = stored.id
        await self.db.flush()

    async def _abort(self, attachment: Optional[Attachment]) -> None:
        path = attachment.path if attachment is not None else None
        await self.db.rollback()
        if path is not None:
            await self.media.remove_file(path)

    # ─── Read ───────────────────────────────────────────

    async def get(self, post_id: int) -> ManagedPost:
        post = await self._load(post_id)
        if post is None:
            raise NotFound("Unable to retrieve post", code="get-post")
        if not await self.is_owned(post_id):
            raise InvalidArgument("Unable to retrieve post meta", code="get-post")

        thumbnail = None
        if post.thumbnail_id is not None:
            thumbnail = await self.db.get(Attachment, post.thumbnail_id)
        return self._managed(post, thumbnail)

    async def list_posts(self) -> list[ManagedPost]:
        """All tagged posts, newest first."""
        result = await self.db.execute(
            select(Post)
            .join(PostMeta, PostMeta.post_id == Post.id)
            .where(PostMeta.meta_key == self.tag_key, PostMeta.meta_value == OWNED)
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        posts = list(result.scalars().all())

        thumbnail_ids = {p.thumbnail_id for p in posts if p.thumbnail_id is not None}
        thumbnails: dict[int, Attachment] = {}
        if thumbnail_ids:
            rows = await self.db.execute(
                select(Attachment).where(Attachment.id.in_(thumbnail_ids))
            )
            thumbnails = {a.id: a for a in rows.scalars().all()}

        return [self._managed(p, thumbnails.get(p.thumbnail_id)) for p in posts]

    def permalink(self, post: Post) -> Optional[str]:
        if post.id is None:
            return None
        return f"{self.settings.site_url.rstrip('/')}/?p={post.id}"

    def _managed(self, post: Post, thumbnail: Optional[Attachment]) -> ManagedPost:
        return ManagedPost(
            post=post,
            body=render_content(post.content),
            thumbnail=thumbnail.url if thumbnail is not None else None,
            permalink=self.permalink(post),
        )

    # ─── Delete ─────────────────────────────────────────

    async def delete(self, post_id: int) -> None:
        """Delete a tagged post and its thumbnail attachment."""
        if not await self.is_owned(post_id):
            raise InvalidArgument("Unable to retrieve post meta", code="delete-post")
        post = await self._load(post_id)
        if post is None:
            raise InvalidArgument("Unable to retrieve post meta", code="delete-post")

        thumbnail = None
        if post.thumbnail_id is not None:
            thumbnail = await self.db.get(Attachment, post.thumbnail_id)
        thumbnail_path = thumbnail.path if thumbnail is not None else None

        try:
            await self.db.execute(delete(PostMeta).where(PostMeta.post_id == post_id))
            await self.db.delete(post)
            if thumbnail is not None:
                await self.media.discard(thumbnail)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("posts.delete_failed", post_id=post_id, error=str(e))
            raise InternalFailure("Unable to delete post", code="delete-post") from e

        if thumbnail_path is not None:
            await self.media.remove_file(thumbnail_path)
        logger.info("posts.deleted", post_id=post_id)
