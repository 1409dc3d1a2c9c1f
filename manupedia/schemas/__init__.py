"""
This file makes the 'schemas' directory a Python package and exposes key schemas
for easier importing.
"""
from .user import UserRead, UserUpdate, RoleUpdateRequest, UserStatistics
from .pagination import PaginatedResponse
from .manuscript import (
    ManuscriptFields, Attachment, StatusUpdateRequest, ManuscriptRead,
    ManuscriptMutationResponse, MessageResponse, ManuscriptStatistics, DetailedStatistics
)
