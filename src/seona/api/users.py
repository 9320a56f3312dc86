"""Users API — who can author content on this site."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from seona.db.engine import get_db
from seona.schemas.user import UserRead
from seona.services.user_service import UserDirectory

router = APIRouter(prefix="/v1/users")


@router.get("", response_model=list[UserRead])
async def list_users(db: AsyncSession = Depends(get_db)):
    """Administrators, editors and authors."""
    return await UserDirectory(db).list_users()
