"""
Central import point for all SQLAlchemy models.

Importing every model here registers them with the Base metadata before
any relationship is resolved or any table is created.
"""
from .base import Base
from .user import User
from .manuscript import Manuscript, ManuscriptStatus


__all__ = [
    "Base",
    "User",
    "Manuscript",
    "ManuscriptStatus",
]
