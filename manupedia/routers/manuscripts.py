from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from ..core.config import settings
from ..dependencies import get_current_user, get_manuscript_service
from ..models.user import User
from ..schemas.manuscript import (
    Attachment, ManuscriptFields, ManuscriptRead, ManuscriptMutationResponse,
    ManuscriptStatistics, MessageResponse
)
from ..schemas.pagination import PaginatedResponse
from ..services.exceptions import ValidationError
from ..services.manuscript_service import ManuscriptService
from ..utils.pagination_utils import create_paginated_response

router = APIRouter()


def parse_manuscript_part(manuscript: str) -> ManuscriptFields:
    """Parse the JSON `manuscript` part of a multipart request."""
    try:
        return ManuscriptFields.model_validate_json(manuscript)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or "manuscript"
        raise ValidationError(f"Invalid manuscript data ({location}): {first.get('msg')}")


def read_attachment(image: Optional[UploadFile]) -> Attachment | None:
    """
    Turn the optional `image` part into an Attachment.
    A file field submitted without a file (no filename) counts as no attachment.
    At most one byte past the size limit is read, enough for the service to reject it.
    """
    if image is None or not image.filename:
        return None
    content = image.file.read(settings.MAX_IMAGE_SIZE_MB * 1024 * 1024 + 1)
    return Attachment(content=content, content_type=image.content_type, filename=image.filename)


# --- Collection endpoints ---

@router.post(
    "",
    response_model=ManuscriptMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a new manuscript"
)
def upload_manuscript(
    manuscript: str = Form(..., description="Manuscript fields as a JSON object."),
    image: Optional[UploadFile] = File(None, description="Optional image of the manuscript."),
    current_user: User = Depends(get_current_user),
    service: ManuscriptService = Depends(get_manuscript_service),
):
    """
    Create a manuscript owned by the caller. It starts in PENDING status.
    """
    created = service.create_manuscript(
        fields=parse_manuscript_part(manuscript),
        owner_id=current_user.id,
        attachment=read_attachment(image),
    )
    return ManuscriptMutationResponse(message="Manuscript uploaded successfully", manuscript=created)


@router.get("", response_model=PaginatedResponse[ManuscriptRead], summary="List manuscripts, newest first")
def list_manuscripts(
    page: int = Query(0, description="Zero-based page index."),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, description="Page size."),
    service: ManuscriptService = Depends(get_manuscript_service),
):
    items, total_count = service.list_manuscripts(page=page, page_size=size)
    return create_paginated_response(items, total_count, page, size)


@router.get("/search", response_model=PaginatedResponse[ManuscriptRead], summary="Search manuscripts")
def search_manuscripts(
    title: Optional[str] = Query(None, description="Case-insensitive substring of the title."),
    author: Optional[str] = Query(None, description="Case-insensitive substring of the author."),
    language: Optional[str] = Query(None, description="Case-insensitive substring of the language."),
    condition: Optional[str] = Query(None, description="Exact, case-sensitive condition."),
    page: int = Query(0, description="Zero-based page index."),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, description="Page size."),
    service: ManuscriptService = Depends(get_manuscript_service),
):
    """
    All supplied filters must match. Results are ordered newest upload first.
    """
    items, total_count = service.search(
        title=title, author=author, language=language, condition=condition,
        page=page, page_size=size,
    )
    return create_paginated_response(items, total_count, page, size)


@router.get("/my-manuscripts", response_model=List[ManuscriptRead], summary="List the caller's manuscripts")
def list_my_manuscripts(
    current_user: User = Depends(get_current_user),
    service: ManuscriptService = Depends(get_manuscript_service),
):
    return service.list_by_owner(current_user.id)


@router.get("/statistics", response_model=ManuscriptStatistics, summary="Dashboard statistics")
def get_statistics(service: ManuscriptService = Depends(get_manuscript_service)):
    return service.get_statistics()


@router.get("/recent", response_model=List[ManuscriptRead], summary="Most recently uploaded manuscripts")
def get_recent_manuscripts(
    limit: int = Query(settings.RECENT_MANUSCRIPTS_LIMIT),
    service: ManuscriptService = Depends(get_manuscript_service),
):
    return service.get_recent(limit)


@router.get("/featured", response_model=List[ManuscriptRead], summary="Featured manuscripts")
def get_featured_manuscripts(service: ManuscriptService = Depends(get_manuscript_service)):
    return service.list_featured()


@router.get(
    "/images/{image_filename}",
    response_class=Response,
    summary="Download a manuscript image",
    responses={200: {"content": {"image/*": {}}}},
)
def get_image(
    image_filename: str,
    service: ManuscriptService = Depends(get_manuscript_service),
):
    content, content_type = service.get_image(image_filename)
    return Response(content=content, media_type=content_type)


# --- Item endpoints ---

@router.get("/{manuscript_id}", response_model=ManuscriptRead, summary="Get a manuscript by id")
def get_manuscript(
    manuscript_id: int,
    service: ManuscriptService = Depends(get_manuscript_service),
):
    return service.get_manuscript(manuscript_id)


@router.put("/{manuscript_id}", response_model=ManuscriptMutationResponse, summary="Update a manuscript")
def update_manuscript(
    manuscript_id: int,
    manuscript: str = Form(..., description="Manuscript fields as a JSON object."),
    image: Optional[UploadFile] = File(None, description="Optional replacement image."),
    current_user: User = Depends(get_current_user),
    service: ManuscriptService = Depends(get_manuscript_service),
):
    """
    Replace all content fields of a manuscript the caller owns.
    Fields left out of the JSON are cleared.
    """
    updated = service.update_manuscript(
        manuscript_id=manuscript_id,
        fields=parse_manuscript_part(manuscript),
        owner_id=current_user.id,
        attachment=read_attachment(image),
    )
    return ManuscriptMutationResponse(message="Manuscript updated successfully", manuscript=updated)


@router.delete("/{manuscript_id}", response_model=MessageResponse, summary="Delete a manuscript")
def delete_manuscript(
    manuscript_id: int,
    current_user: User = Depends(get_current_user),
    service: ManuscriptService = Depends(get_manuscript_service),
):
    service.delete_manuscript(manuscript_id, current_user.id)
    return MessageResponse(message="Manuscript deleted successfully")
