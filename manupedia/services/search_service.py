import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..models import Manuscript
from ..repositories import ManuscriptRepository
from ..utils.pagination_utils import validate_page_request

logger = logging.getLogger(__name__)


def _present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def build_manuscript_filters(
    title: Optional[str] = None,
    author: Optional[str] = None,
    language: Optional[str] = None,
    condition: Optional[str] = None,
) -> list:
    """
    Translate the optional search criteria into SQLAlchemy predicates.

    Absent or blank criteria add nothing. Title, author and language match as
    case-insensitive substrings (LIKE wildcards in the input are escaped);
    condition must match exactly, including case.
    """
    filters = []
    if _present(title):
        filters.append(Manuscript.title.icontains(title.strip(), autoescape=True))
    if _present(author):
        filters.append(Manuscript.author.icontains(author.strip(), autoescape=True))
    if _present(language):
        filters.append(Manuscript.language.icontains(language.strip(), autoescape=True))
    if _present(condition):
        filters.append(Manuscript.condition == condition)
    return filters


def search_manuscripts(
    db: Session,
    title: Optional[str] = None,
    author: Optional[str] = None,
    language: Optional[str] = None,
    condition: Optional[str] = None,
    page: int = 0,
    page_size: Optional[int] = None,
) -> Tuple[List[Manuscript], int]:
    """
    Search manuscripts with AND-combined optional filters, newest upload first.
    Returns the requested zero-based page and the total number of matches.
    """
    if page_size is None:
        page_size = settings.DEFAULT_PAGE_SIZE
    validate_page_request(page, page_size, settings.MAX_PAGE_SIZE)

    filters = build_manuscript_filters(title=title, author=author, language=language, condition=condition)
    logger.debug(f"Searching manuscripts with {len(filters)} filter(s), page={page}, size={page_size}")

    return ManuscriptRepository(db).find_page(filters=filters, page=page, page_size=page_size)
