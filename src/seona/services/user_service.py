"""User directory — read-only listing of users who can own content."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from seona.db.models import User

CONTENT_ROLES = ("administrator", "editor", "author")


class UserDirectory:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_users(self, roles: tuple[str, ...] = CONTENT_ROLES) -> list[User]:
        result = await self.db.execute(
            select(User).where(User.role.in_(roles)).order_by(User.id)
        )
        return list(result.scalars().all())
