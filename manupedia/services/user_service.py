import logging
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.config import settings
from ..models import Manuscript
from ..models.user import User
from ..schemas.user import UserStatistics
from ..utils.pagination_utils import page_offset, validate_page_request
from .exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

VALID_ROLES = ("user", "admin")


def get_user_by_id(db: Session, user_id: int) -> User | None:
    """Look up a user by id."""
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> User | None:
    """Look up a user by email address."""
    return db.query(User).filter(User.email == email).first()

def get_user(db: Session, user_id: int) -> User:
    user = get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError(f"User not found with id: {user_id}")
    return user

def list_users(db: Session, page: int = 0, page_size: int | None = None) -> Tuple[List[User], int]:
    """All users in id order, one zero-based page at a time."""
    if page_size is None:
        page_size = settings.ADMIN_DEFAULT_PAGE_SIZE
    validate_page_request(page, page_size, settings.MAX_PAGE_SIZE)

    query = db.query(User)
    total_count = query.count()
    users = query.order_by(User.id).offset(page_offset(page, page_size)).limit(page_size).all()
    return users, total_count

def update_user(db: Session, user_id: int, display_name: str | None = None, email: str | None = None) -> User:
    """
    Update a user's profile. Only the fields given are changed; an email
    already used by another account is rejected.
    """
    user = get_user(db, user_id)

    if display_name is not None:
        if not display_name.strip():
            raise ValidationError("Display name cannot be blank")
        user.display_name = display_name
    if email is not None and email != user.email:
        if get_user_by_email(db, email):
            raise ValidationError("Email already exists")
        user.email = email

    db.commit()
    db.refresh(user)
    logger.info(f"User {user_id} profile updated")
    return user

def update_user_role(db: Session, user_id: int, role: str) -> User:
    """Set a user's role. Only the exact tokens "user" and "admin" are accepted."""
    if role not in VALID_ROLES:
        raise ValidationError(f"Invalid role '{role}'. Must be one of: {', '.join(VALID_ROLES)}")
    user = get_user(db, user_id)

    previous = user.role
    user.role = role
    db.commit()
    db.refresh(user)
    logger.info(f"User {user_id} role changed from {previous} to {role}")
    return user

def delete_user(db: Session, user_id: int) -> None:
    """
    Delete a user account. Accounts that still own manuscripts are refused;
    their manuscripts have to be deleted first.
    """
    user = get_user(db, user_id)

    owned = db.query(func.count(Manuscript.id)).filter(Manuscript.owner_id == user_id).scalar()
    if owned:
        raise ValidationError(f"User {user_id} still owns {owned} manuscript(s) and cannot be deleted")

    db.delete(user)
    db.commit()
    logger.info(f"User {user_id} deleted")

def get_user_statistics(db: Session) -> UserStatistics:
    admin_users = db.query(func.count(User.id)).filter(User.role == "admin").scalar()
    total_users = db.query(func.count(User.id)).scalar()
    return UserStatistics(
        total_users=total_users,
        admin_users=admin_users,
        regular_users=total_users - admin_users,
    )
