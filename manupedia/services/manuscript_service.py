import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.object_storage import BlobStore
from ..models import Manuscript, ManuscriptStatus, User
from ..repositories import ManuscriptRepository
from ..schemas.manuscript import Attachment, ManuscriptFields, ManuscriptRead, ManuscriptStatistics
from ..utils.file_utils import content_type_for
from .exceptions import AuthorizationError, NotFoundError, ValidationError
from . import search_service

logger = logging.getLogger(__name__)

# Content fields the owner may set; every update overwrites all of them.
CONTENT_FIELDS = (
    "title", "author", "date_created", "origin_location", "language",
    "material", "dimensions", "condition", "description", "content",
)

OwnershipCheck = Callable[[Manuscript, int], bool]


def owns_manuscript(manuscript: Manuscript, user_id: int) -> bool:
    """Default ownership predicate: the caller is the user who created the record."""
    return manuscript.owner_id == user_id


def build_image_url(image_filename: Optional[str]) -> Optional[str]:
    if not image_filename:
        return None
    return f"{settings.IMAGE_URL_PREFIX}{image_filename}"


def build_manuscript_response(manuscript: Manuscript) -> ManuscriptRead:
    """
    Project a manuscript onto its public shape: all content fields, the derived
    image URL and the owner's display name. The owner's id is not included.
    """
    owner = manuscript.owner
    return ManuscriptRead(
        id=manuscript.id,
        title=manuscript.title,
        author=manuscript.author,
        date_created=manuscript.date_created,
        origin_location=manuscript.origin_location,
        language=manuscript.language,
        material=manuscript.material,
        dimensions=manuscript.dimensions,
        condition=manuscript.condition,
        description=manuscript.description,
        content=manuscript.content,
        image_url=build_image_url(manuscript.image_filename),
        uploaded_by_display_name=owner.display_name if owner else None,
        upload_date=manuscript.upload_date,
        last_modified=manuscript.last_modified,
        status=manuscript.status,
        featured=bool(manuscript.featured),
    )


def next_modification_time(manuscript: Manuscript) -> datetime:
    """A timestamp strictly later than the record's current last_modified."""
    now = datetime.utcnow()
    if manuscript.last_modified is not None and now <= manuscript.last_modified:
        now = manuscript.last_modified + timedelta(microseconds=1)
    return now


def discard_image(blob_store: BlobStore, image_filename: Optional[str], reason: str) -> None:
    """
    Best-effort removal of a stored image. A failure is logged and the caller
    carries on; it is never reported as a failure of the surrounding operation.
    """
    if not image_filename:
        return
    if not blob_store.delete(image_filename):
        logger.warning(f"Could not delete image '{image_filename}' ({reason}); continuing without it.")


class ManuscriptService:
    """
    Manuscript lifecycle: creation, owner-only updates and deletion, image
    storage, lookups and the dashboard figures.
    """

    def __init__(self, db: Session, blob_store: BlobStore, ownership_check: OwnershipCheck = owns_manuscript):
        self.db = db
        self.blob_store = blob_store
        self.ownership_check = ownership_check
        self.repo = ManuscriptRepository(db)

    # --- Validation ---

    def _validate_fields(self, fields: ManuscriptFields) -> None:
        if fields.title is None or not fields.title.strip():
            raise ValidationError("Title is required")
        if fields.description is not None and len(fields.description) > settings.DESCRIPTION_MAX_LENGTH:
            raise ValidationError(f"Description cannot exceed {settings.DESCRIPTION_MAX_LENGTH} characters")

    def _validate_attachment(self, attachment: Attachment) -> None:
        if not attachment.content:
            raise ValidationError("Image file is empty")
        if not attachment.content_type or not attachment.content_type.startswith("image/"):
            raise ValidationError(f"Only image files are accepted, got '{attachment.content_type}'")
        max_bytes = settings.MAX_IMAGE_SIZE_MB * 1024 * 1024
        if len(attachment.content) > max_bytes:
            raise ValidationError(f"Image exceeds the {settings.MAX_IMAGE_SIZE_MB}MB size limit")

    def _get_or_404(self, manuscript_id: int) -> Manuscript:
        manuscript = self.repo.get_by_id(manuscript_id)
        if not manuscript:
            raise NotFoundError(f"Manuscript not found with id: {manuscript_id}")
        return manuscript

    def _authorize(self, manuscript: Manuscript, user_id: int, action: str) -> None:
        if not self.ownership_check(manuscript, user_id):
            raise AuthorizationError(f"You don't have permission to {action} this manuscript")

    def _store_image(self, attachment: Attachment) -> str:
        return self.blob_store.store(attachment.content, attachment.content_type, attachment.filename)

    # --- Lifecycle ---

    def create_manuscript(self, fields: ManuscriptFields, owner_id: int, attachment: Attachment | None = None) -> ManuscriptRead:
        """
        Create a manuscript owned by owner_id, storing the image first if one is attached.
        The record starts PENDING and unfeatured.
        """
        self._validate_fields(fields)
        if attachment is not None:
            self._validate_attachment(attachment)

        owner = self.db.get(User, owner_id)
        if owner is None:
            raise NotFoundError(f"User not found: {owner_id}")

        image_filename = self._store_image(attachment) if attachment is not None else None

        now = datetime.utcnow()
        manuscript = Manuscript(
            **{name: getattr(fields, name) for name in CONTENT_FIELDS},
            image_filename=image_filename,
            owner_id=owner.id,
            status=ManuscriptStatus.PENDING,
            featured=False,
            upload_date=now,
            last_modified=now,
        )

        try:
            self.repo.add(manuscript)
        except Exception:
            discard_image(self.blob_store, image_filename, "manuscript could not be saved")
            raise

        logger.info(f"Manuscript {manuscript.id} created by user {owner_id}")
        return build_manuscript_response(manuscript)

    def update_manuscript(
        self,
        manuscript_id: int,
        fields: ManuscriptFields,
        owner_id: int,
        attachment: Attachment | None = None,
    ) -> ManuscriptRead:
        """
        Replace every content field of an owned manuscript, and its image if a
        new one is attached. The previous image is deleted only once the record
        points at the new one.
        """
        manuscript = self._get_or_404(manuscript_id)
        self._authorize(manuscript, owner_id, "update")
        self._validate_fields(fields)
        if attachment is not None:
            self._validate_attachment(attachment)

        previous_image = manuscript.image_filename
        new_image = self._store_image(attachment) if attachment is not None else None

        for name in CONTENT_FIELDS:
            setattr(manuscript, name, getattr(fields, name))
        if new_image is not None:
            manuscript.image_filename = new_image
        manuscript.last_modified = next_modification_time(manuscript)

        try:
            self.repo.save(manuscript)
        except Exception:
            discard_image(self.blob_store, new_image, "manuscript update was rolled back")
            raise

        if new_image is not None:
            discard_image(self.blob_store, previous_image, f"replaced on manuscript {manuscript_id}")

        logger.info(f"Manuscript {manuscript_id} updated by user {owner_id}")
        return build_manuscript_response(manuscript)

    def delete_manuscript(self, manuscript_id: int, owner_id: int) -> None:
        """Delete an owned manuscript, then its image (best-effort)."""
        manuscript = self._get_or_404(manuscript_id)
        self._authorize(manuscript, owner_id, "delete")
        image_filename = manuscript.image_filename

        self.repo.delete(manuscript)
        discard_image(self.blob_store, image_filename, f"manuscript {manuscript_id} deleted")
        logger.info(f"Manuscript {manuscript_id} deleted by user {owner_id}")

    # --- Reads ---

    def get_manuscript(self, manuscript_id: int) -> ManuscriptRead:
        return build_manuscript_response(self._get_or_404(manuscript_id))

    def list_by_owner(self, owner_id: int) -> List[ManuscriptRead]:
        return [build_manuscript_response(m) for m in self.repo.list_by_owner(owner_id)]

    def list_manuscripts(self, page: int = 0, page_size: int | None = None) -> Tuple[List[ManuscriptRead], int]:
        """Default listing: every manuscript, newest upload first."""
        return self.search(page=page, page_size=page_size)

    def search(
        self,
        title: str | None = None,
        author: str | None = None,
        language: str | None = None,
        condition: str | None = None,
        page: int = 0,
        page_size: int | None = None,
    ) -> Tuple[List[ManuscriptRead], int]:
        items, total_count = search_service.search_manuscripts(
            self.db, title=title, author=author, language=language, condition=condition,
            page=page, page_size=page_size,
        )
        return [build_manuscript_response(m) for m in items], total_count

    def get_image(self, image_filename: str) -> Tuple[bytes, str]:
        """Return the stored image bytes and the content type they are served with."""
        content = self.blob_store.retrieve(image_filename)
        return content, content_type_for(image_filename)

    # --- Dashboard ---

    def get_statistics(self) -> ManuscriptStatistics:
        since = datetime.utcnow() - timedelta(days=settings.RECENT_UPDATES_WINDOW_DAYS)
        return ManuscriptStatistics(
            total_manuscripts=self.repo.count_all(),
            recent_updates=self.repo.count_modified_after(since),
            total_contributors=self.repo.count_contributors(),
        )

    def get_recent(self, limit: int | None = None) -> List[ManuscriptRead]:
        if limit is None:
            limit = settings.RECENT_MANUSCRIPTS_LIMIT
        if limit < 1 or limit > settings.MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {settings.MAX_PAGE_SIZE}, got {limit}")
        return [build_manuscript_response(m) for m in self.repo.find_recent(limit)]

    def list_featured(self) -> List[ManuscriptRead]:
        return [build_manuscript_response(m) for m in self.repo.find_featured()]
