import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.object_storage import BlobStore
from ..models import Manuscript, ManuscriptStatus
from ..repositories import ManuscriptRepository
from ..repositories.manuscript_repo import RECENTLY_MODIFIED_FIRST
from ..schemas.manuscript import DetailedStatistics, ManuscriptRead
from ..utils.pagination_utils import validate_page_request
from .exceptions import NotFoundError, ValidationError
from .manuscript_service import ManuscriptService, build_manuscript_response, discard_image, next_modification_time
from . import user_service

logger = logging.getLogger(__name__)

VALID_STATUS_TOKENS = tuple(s.value for s in ManuscriptStatus)


def parse_status(token: Optional[str]) -> ManuscriptStatus:
    """Match a status token exactly (case-sensitive). Anything else is rejected, never coerced."""
    if token not in VALID_STATUS_TOKENS:
        raise ValidationError(f"Invalid status '{token}'. Must be one of: {', '.join(VALID_STATUS_TOKENS)}")
    return ManuscriptStatus(token)


class ModerationService:
    """
    Admin-side operations on any manuscript, regardless of owner.
    Callers are expected to have been checked for the admin role already.
    """

    def __init__(self, db: Session, blob_store: BlobStore):
        self.db = db
        self.blob_store = blob_store
        self.repo = ManuscriptRepository(db)

    def _get_or_404(self, manuscript_id: int) -> Manuscript:
        manuscript = self.repo.get_by_id(manuscript_id)
        if not manuscript:
            raise NotFoundError(f"Manuscript not found with id: {manuscript_id}")
        return manuscript

    def list_for_admin(
        self,
        page: int = 0,
        page_size: int | None = None,
        status: str | None = None,
    ) -> Tuple[List[ManuscriptRead], int]:
        """List every manuscript, optionally one status only, most recently modified first."""
        if page_size is None:
            page_size = settings.ADMIN_DEFAULT_PAGE_SIZE
        validate_page_request(page, page_size, settings.MAX_PAGE_SIZE)

        filters = []
        if status:
            filters.append(Manuscript.status == parse_status(status))

        items, total_count = self.repo.find_page(
            filters=filters, page=page, page_size=page_size, order_by=RECENTLY_MODIFIED_FIRST
        )
        return [build_manuscript_response(m) for m in items], total_count

    def set_status(self, manuscript_id: int, new_status: str) -> ManuscriptRead:
        status = parse_status(new_status)
        manuscript = self._get_or_404(manuscript_id)

        previous = manuscript.status
        manuscript.status = status
        manuscript.last_modified = next_modification_time(manuscript)
        self.repo.save(manuscript)

        logger.info(f"Manuscript {manuscript_id} status changed from {previous.value} to {status.value}")
        return build_manuscript_response(manuscript)

    def toggle_featured(self, manuscript_id: int) -> ManuscriptRead:
        manuscript = self._get_or_404(manuscript_id)
        manuscript.featured = not manuscript.featured
        self.repo.save(manuscript)

        logger.info(f"Manuscript {manuscript_id} featured set to {manuscript.featured}")
        return build_manuscript_response(manuscript)

    def delete_as_admin(self, manuscript_id: int) -> None:
        """Delete any manuscript and, best-effort, its image."""
        manuscript = self._get_or_404(manuscript_id)
        image_filename = manuscript.image_filename

        self.repo.delete(manuscript)
        discard_image(self.blob_store, image_filename, f"manuscript {manuscript_id} deleted by admin")
        logger.info(f"Manuscript {manuscript_id} deleted by admin")

    def get_detailed_statistics(self) -> DetailedStatistics:
        return DetailedStatistics(
            manuscripts=ManuscriptService(self.db, self.blob_store).get_statistics(),
            users=user_service.get_user_statistics(self.db),
        )
