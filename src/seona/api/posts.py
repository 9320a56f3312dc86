"""Managed posts API.

Learn: Thin HTTP layer over PostSyncService. Writes take form fields
(multipart when a `thumbnail` file is attached, url-encoded otherwise).
Ownership checks and error mapping live in the service; routes only
shape requests and responses.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from seona.context import SiteContext, get_context
from seona.db.engine import get_db
from seona.schemas.post import ManagedPostRead, PostCreated, PostRead
from seona.services.post_service import (
    ManagedPost,
    PostFields,
    PostSyncService,
    Upload,
)

router = APIRouter(prefix="/v1/posts")


def _svc(
    db: AsyncSession = Depends(get_db),
    ctx: SiteContext = Depends(get_context),
) -> PostSyncService:
    return PostSyncService(db, ctx.settings)


def _fields(
    title: Optional[str] = Form(None),
    body: Optional[str] = Form(None),
    excerpt: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    slug: Optional[str] = Form(None),
) -> PostFields:
    return PostFields(title=title, body=body, excerpt=excerpt, status=status, slug=slug)


async def _upload(file: Optional[UploadFile]) -> Optional[Upload]:
    if file is None:
        return None
    return Upload(
        filename=file.filename,
        content_type=file.content_type,
        data=await file.read(),
    )


def _read(managed: ManagedPost) -> ManagedPostRead:
    post = managed.post
    return ManagedPostRead(
        post=PostRead(
            id=post.id,
            title=post.title,
            body=managed.body,
            excerpt=post.excerpt,
            status=post.status,
            slug=post.slug,
            type=post.post_type,
            author_id=post.author_id,
            thumbnail_id=post.thumbnail_id,
            created_at=post.created_at,
            updated_at=post.updated_at,
        ),
        thumbnail=managed.thumbnail,
        permalink=managed.permalink,
    )


@router.get("", response_model=list[ManagedPostRead])
async def list_posts(svc: PostSyncService = Depends(_svc)):
    return [_read(m) for m in await svc.list_posts()]


@router.post("", response_model=PostCreated)
async def insert_post(
    fields: PostFields = Depends(_fields),
    thumbnail: Optional[UploadFile] = File(None),
    svc: PostSyncService = Depends(_svc),
):
    """Create a post owned by Seona."""
    post = await svc.upsert(fields, thumbnail=await _upload(thumbnail))
    return PostCreated(id=post.id, permalink=svc.permalink(post))


@router.get("/{post_id}", response_model=ManagedPostRead)
async def get_post(post_id: int, svc: PostSyncService = Depends(_svc)):
    return _read(await svc.get(post_id))


@router.post("/{post_id}", status_code=204)
async def update_post(
    post_id: int,
    fields: PostFields = Depends(_fields),
    thumbnail: Optional[UploadFile] = File(None),
    svc: PostSyncService = Depends(_svc),
):
    """Update a post. Only provided fields change."""
    await svc.upsert(fields, post_id=post_id, thumbnail=await _upload(thumbnail))
    return Response(status_code=204)


@router.delete("/{post_id}", status_code=204)
async def delete_post(post_id: int, svc: PostSyncService = Depends(_svc)):
    await svc.delete(post_id)
    return Response(status_code=204)
