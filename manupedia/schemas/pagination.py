from typing import Generic, TypeVar, List
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

DataType = TypeVar('DataType')

class PaginatedResponse(BaseModel, Generic[DataType]):
    items: List[DataType]
    total_count: int = Field(..., description="Number of records matching the query across all pages.")
    page: int = Field(..., description="Zero-based index of this page.")
    size: int = Field(..., description="Requested page size.")
    total_pages: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True
