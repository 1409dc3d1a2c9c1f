from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose import JWTError

from .core.db import get_db
from .core.object_storage import BlobStore, get_blob_store
from .core.security import decode_access_token
from .models import User
from .services.manuscript_service import ManuscriptService
from .services.moderation_service import ModerationService
from .services import user_service

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token")

# --- Service Dependencies ---

def get_manuscript_service(
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
) -> ManuscriptService:
    """Dependency to get an instance of ManuscriptService."""
    return ManuscriptService(db=db, blob_store=blob_store)

def get_moderation_service(
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
) -> ModerationService:
    """Dependency to get an instance of ModerationService."""
    return ModerationService(db=db, blob_store=blob_store)

# --- Authentication and Authorization Dependencies ---

def get_current_user(
    db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)
) -> User:
    """Dependency to get the current user from a JWT token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        user_id = decode_access_token(token)
    except JWTError:
        raise credentials_exception

    user = user_service.get_user_by_id(db, user_id)
    if user is None:
        raise credentials_exception
    return user

def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency to ensure the current user has the 'admin' role."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This operation requires admin privileges",
        )
    return current_user
