import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import desc, func
from sqlalchemy.orm import Session, joinedload

from ..models import Manuscript
from ..utils.pagination_utils import page_offset

logger = logging.getLogger(__name__)

# Default ordering: newest upload first, id as a stable tie-breaker.
NEWEST_FIRST = (desc(Manuscript.upload_date), desc(Manuscript.id))
RECENTLY_MODIFIED_FIRST = (desc(Manuscript.last_modified), desc(Manuscript.id))


class ManuscriptRepository:
    """Transactional CRUD and predicate queries over manuscript records."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Manuscript).options(joinedload(Manuscript.owner))

    def get_by_id(self, manuscript_id: int) -> Optional[Manuscript]:
        """Fetch a manuscript by id, or None."""
        return self._query().filter(Manuscript.id == manuscript_id).first()

    def add(self, manuscript: Manuscript) -> Manuscript:
        """Insert a new manuscript and commit."""
        self.db.add(manuscript)
        return self.save(manuscript)

    def save(self, manuscript: Manuscript) -> Manuscript:
        """Commit pending changes to a manuscript. Rolls back and re-raises on failure."""
        manuscript_id = manuscript.id
        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error saving manuscript {manuscript_id}: {e}")
            raise
        self.db.refresh(manuscript)
        return manuscript

    def delete(self, manuscript: Manuscript) -> None:
        """Delete a manuscript and commit. Rolls back and re-raises on failure."""
        manuscript_id = manuscript.id
        try:
            self.db.delete(manuscript)
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error deleting manuscript {manuscript_id}: {e}")
            raise

    def list_by_owner(self, owner_id: int) -> List[Manuscript]:
        return self._query().filter(Manuscript.owner_id == owner_id).order_by(*NEWEST_FIRST).all()

    def find_page(
        self,
        filters: Sequence = (),
        page: int = 0,
        page_size: int = 10,
        order_by: Sequence = NEWEST_FIRST,
    ) -> Tuple[List[Manuscript], int]:
        """
        Run an AND-combined predicate query and return one page plus the total
        number of matching records.
        """
        query = self.db.query(Manuscript)
        for clause in filters:
            query = query.filter(clause)

        # Count before applying ordering and pagination.
        total_count = query.count()

        items = query.options(joinedload(Manuscript.owner)).order_by(*order_by) \
            .offset(page_offset(page, page_size)).limit(page_size).all()
        return items, total_count

    def find_recent(self, limit: int) -> List[Manuscript]:
        return self._query().order_by(*NEWEST_FIRST).limit(limit).all()

    def find_featured(self) -> List[Manuscript]:
        return self._query().filter(Manuscript.featured.is_(True)).order_by(*NEWEST_FIRST).all()

    def count_all(self) -> int:
        return self.db.query(func.count(Manuscript.id)).scalar()

    def count_modified_after(self, since: datetime) -> int:
        return self.db.query(func.count(Manuscript.id)).filter(Manuscript.last_modified > since).scalar()

    def count_contributors(self) -> int:
        """Number of distinct users who own at least one manuscript."""
        return self.db.query(func.count(func.distinct(Manuscript.owner_id))).scalar()
