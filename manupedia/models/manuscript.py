import enum
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship
from ..models.base import Base

class ManuscriptStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Manuscript(Base):
    __tablename__ = "manuscripts"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # --- Content fields (owner-editable) ---
    title = Column(String, nullable=False)
    author = Column(String, nullable=True)
    date_created = Column(String, nullable=True)
    origin_location = Column(String, nullable=True)
    language = Column(String, nullable=True)
    material = Column(String, nullable=True)
    dimensions = Column(String, nullable=True)
    condition = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    content = Column(Text, nullable=True)

    # Generated blob name of the attached image; the public URL is derived from it
    image_filename = Column(String, nullable=True)

    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # --- Moderation (admin-editable) ---
    status = Column(
        SQLAlchemyEnum(ManuscriptStatus, name="manuscript_status_enum", values_callable=lambda obj: [e.value for e in obj]),
        default=ManuscriptStatus.PENDING,
        nullable=False,
        index=True
    )
    featured = Column(Boolean, default=False, nullable=False)

    # --- Timestamps ---
    upload_date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    last_modified = Column(DateTime, default=datetime.utcnow, nullable=False)

    # --- Relationships ---
    owner = relationship("User", back_populates="manuscripts")
