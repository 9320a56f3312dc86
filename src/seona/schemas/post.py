"""Pydantic schemas for managed posts.

Learn: Post writes arrive as form fields (so a thumbnail can ride along
as a file), so there's no "Create" schema — the route collects the
fields into a PostFields. These are the "Read" shapes.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class PostRead(BaseModel):
    id: int
    title: str
    body: str
    excerpt: str
    status: str
    slug: str
    type: str
    author_id: Optional[int] = None
    thumbnail_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class ManagedPostRead(BaseModel):
    """A post as returned by get/list — body is rendered HTML."""
    post: PostRead
    thumbnail: Optional[str] = None
    permalink: Optional[str] = None


class PostCreated(BaseModel):
    id: int
    permalink: Optional[str] = None
