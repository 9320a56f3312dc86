"""Pydantic schemas for the user directory."""

from pydantic import BaseModel


class UserRead(BaseModel):
    id: int
    login: str
    email: str
    display_name: str
    role: str

    model_config = {"from_attributes": True}
