from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from ..models.manuscript import ManuscriptStatus
from .user import UserStatistics


class CamelModel(BaseModel):
    """Base for schemas exchanged with the frontend in camelCase."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# --- Input Schemas ---

class ManuscriptFields(CamelModel):
    """
    Owner-editable content of a manuscript, as sent in the `manuscript` part of
    an upload/update request. Required-ness and length limits are enforced by
    the service so that they surface as ValidationError.
    """
    title: Optional[str] = None
    author: Optional[str] = None
    date_created: Optional[str] = None
    origin_location: Optional[str] = None
    language: Optional[str] = None
    material: Optional[str] = None
    dimensions: Optional[str] = None
    condition: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None


@dataclass(frozen=True)
class Attachment:
    """An uploaded image: raw bytes plus the MIME type and filename the client declared."""
    content: bytes
    content_type: Optional[str]
    filename: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    status: str = Field(..., description="One of PENDING, APPROVED, REJECTED (case-sensitive).")


# --- Response Schemas ---

class ManuscriptRead(CamelModel):
    """Externally visible projection of a manuscript. Never carries the owner's id."""
    id: int
    title: str
    author: Optional[str] = None
    date_created: Optional[str] = None
    origin_location: Optional[str] = None
    language: Optional[str] = None
    material: Optional[str] = None
    dimensions: Optional[str] = None
    condition: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None
    uploaded_by_display_name: Optional[str] = None
    upload_date: datetime
    last_modified: datetime
    status: ManuscriptStatus
    featured: bool

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True


class ManuscriptMutationResponse(BaseModel):
    message: str
    manuscript: ManuscriptRead


class MessageResponse(BaseModel):
    message: str


class ManuscriptStatistics(CamelModel):
    total_manuscripts: int
    recent_updates: int
    total_contributors: int


class DetailedStatistics(CamelModel):
    """Admin dashboard: manuscript figures plus user account counts."""
    manuscripts: ManuscriptStatistics
    users: UserStatistics
