from fastapi import APIRouter, Depends

from ..schemas.user import UserRead
from ..dependencies import get_current_user
from ..models.user import User


router = APIRouter()

@router.get("/me", response_model=UserRead)
def read_users_me(current_user: User = Depends(get_current_user)):
    """
    Get the details of the currently logged-in user.
    """
    return current_user
