# app/crud/crud_user.py
from pydantic import BaseModel

from .base import CRUDBase
from app.models.user import User


class CRUDUser(CRUDBase[User, BaseModel, BaseModel]):
    """Read-only access to the user directory."""


user = CRUDUser(User)
