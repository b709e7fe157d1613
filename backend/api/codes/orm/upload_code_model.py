"""Upload code ORM model."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from database import Base


class UploadCodeModel(Base):
    __tablename__ = "upload_codes"

    id = Column(String, primary_key=True)
    code = Column(String, unique=True, nullable=False, index=True)
    max_uses = Column(Integer, nullable=False, default=1)
    current_uses = Column(Integer, nullable=False, default=0)
    max_file_size_mb = Column(Integer, nullable=False, default=500)
    created_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
