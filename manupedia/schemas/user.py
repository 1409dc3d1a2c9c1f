from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

# Properties to return to client
class UserRead(BaseModel):
    id: int
    username: str
    email: str
    display_name: str
    role: str
    created_at: datetime

    class Config:
        from_attributes = True

# Properties an admin may change on a profile
class UserUpdate(BaseModel):
    display_name: Optional[str] = None
    email: Optional[str] = None

class RoleUpdateRequest(BaseModel):
    role: str = Field(..., description='Either "user" or "admin" (case-sensitive).')

class UserStatistics(BaseModel):
    total_users: int
    admin_users: int
    regular_users: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True
