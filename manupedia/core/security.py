from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError

from ..core.config import settings
from ..models.user import User


# --- JWT Access Token Creation ---
def create_access_token(user: User, expires_delta: timedelta | None = None) -> str:
    """
    Issue a signed access token whose subject is the user's id.
    Credential checks happen before this is called and are not part of this service.
    """
    to_encode = {"sub": str(user.id)}

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire, "type": "access"})

    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> int:
    """
    Return the user id carried by an access token.
    Raises JWTError if the token is invalid, expired, or not an access token.
    """
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if payload.get("type") != "access":
        raise JWTError("Not an access token")

    subject = payload.get("sub")
    if subject is None:
        raise JWTError("Token has no subject")

    try:
        return int(subject)
    except (TypeError, ValueError):
        raise JWTError("Token subject is not a user id")
