"""File ORM model."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

from database import Base


class FileModel(Base):
    __tablename__ = "files"
    __table_args__ = (
        Index("idx_files_expires_at", "expires_at"),
        Index("idx_files_created_at", "created_at"),
    )

    id = Column(String, primary_key=True)
    original_name = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    storage_key = Column(String, nullable=False)
    byte_size = Column(Integer, nullable=False)
    mime_type = Column(String, nullable=True)
    uploaded_by = Column(String, nullable=False, default="admin")
    upload_code_id = Column(String, ForeignKey("upload_codes.id"), nullable=True)
    created_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=False)
