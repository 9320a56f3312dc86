"""Option store — the site's persistent key/value settings.

Learn: Mirrors the classic get/add/update/delete option API. `add`
is insert-if-absent and never overwrites, which is what the identity
store relies on for write-once semantics.
"""

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from seona.db.models import Option


class OptionStore:
    """Named string values backed by the options table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, name: str) -> str | None:
        result = await self.db.execute(
            select(Option.value).where(Option.name == name)
        )
        return result.scalars().first()

    async def add(self, name: str, value: str) -> bool:
        """Insert `name` only if absent. Returns False if it already existed."""
        if await self.get(name) is not None:
            return False
        self.db.add(Option(name=name, value=value))
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost an insert race; the other writer's value stands.
            await self.db.rollback()
            return False
        return True

    async def update(self, name: str, value: str) -> None:
        """Insert or overwrite `name`."""
        option = await self.db.get(Option, name)
        if option is None:
            self.db.add(Option(name=name, value=value))
        else:
            option.value = value
        await self.db.commit()

    async def delete(self, name: str) -> bool:
        """Remove `name`. Returns False if it was not set."""
        result = await self.db.execute(delete(Option).where(Option.name == name))
        await self.db.commit()
        return result.rowcount > 0
