from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.db import get_db
from ..dependencies import get_moderation_service, require_admin
from ..schemas.manuscript import DetailedStatistics, ManuscriptRead, MessageResponse, StatusUpdateRequest
from ..schemas.user import RoleUpdateRequest, UserRead, UserUpdate
from ..schemas.pagination import PaginatedResponse
from ..services.moderation_service import ModerationService
from ..services import user_service
from ..utils.pagination_utils import create_paginated_response

router = APIRouter(
    dependencies=[Depends(require_admin)],
)


@router.get(
    "/manuscripts",
    response_model=PaginatedResponse[ManuscriptRead],
    summary="List all manuscripts for moderation"
)
def list_manuscripts_for_admin(
    page: int = Query(0, description="Zero-based page index."),
    size: int = Query(settings.ADMIN_DEFAULT_PAGE_SIZE, description="Page size."),
    status: Optional[str] = Query(None, description="Only manuscripts in this status."),
    service: ModerationService = Depends(get_moderation_service),
):
    """
    Lists manuscripts of every owner, most recently modified first.
    """
    items, total_count = service.list_for_admin(page=page, page_size=size, status=status)
    return create_paginated_response(items, total_count, page, size)


@router.put("/manuscripts/{manuscript_id}/status", response_model=ManuscriptRead, summary="Set moderation status")
def update_manuscript_status(
    manuscript_id: int,
    payload: StatusUpdateRequest,
    service: ModerationService = Depends(get_moderation_service),
):
    return service.set_status(manuscript_id, payload.status)


@router.put("/manuscripts/{manuscript_id}/featured", response_model=ManuscriptRead, summary="Toggle featured flag")
def toggle_manuscript_featured(
    manuscript_id: int,
    service: ModerationService = Depends(get_moderation_service),
):
    return service.toggle_featured(manuscript_id)


@router.delete("/manuscripts/{manuscript_id}", response_model=MessageResponse, summary="Delete any manuscript")
def delete_manuscript_as_admin(
    manuscript_id: int,
    service: ModerationService = Depends(get_moderation_service),
):
    service.delete_as_admin(manuscript_id)
    return MessageResponse(message="Manuscript deleted successfully")


# --- User management ---

@router.get("/users", response_model=PaginatedResponse[UserRead], summary="List user accounts")
def list_users(
    page: int = Query(0, description="Zero-based page index."),
    size: int = Query(settings.ADMIN_DEFAULT_PAGE_SIZE, description="Page size."),
    db: Session = Depends(get_db),
):
    users, total_count = user_service.list_users(db, page=page, page_size=size)
    items = [UserRead.model_validate(user) for user in users]
    return create_paginated_response(items, total_count, page, size)


@router.get("/users/{user_id}", response_model=UserRead, summary="Get a user account")
def get_user(user_id: int, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)


@router.put("/users/{user_id}", response_model=UserRead, summary="Update a user's profile")
def update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    return user_service.update_user(db, user_id, display_name=payload.display_name, email=payload.email)


@router.put("/users/{user_id}/role", response_model=UserRead, summary="Change a user's role")
def update_user_role(user_id: int, payload: RoleUpdateRequest, db: Session = Depends(get_db)):
    return user_service.update_user_role(db, user_id, payload.role)


@router.delete("/users/{user_id}", response_model=MessageResponse, summary="Delete a user account")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user_service.delete_user(db, user_id)
    return MessageResponse(message="User deleted successfully")


# --- Statistics ---

@router.get("/statistics/detailed", response_model=DetailedStatistics, summary="Manuscript and user statistics")
def get_detailed_statistics(service: ModerationService = Depends(get_moderation_service)):
    return service.get_detailed_statistics()
