"""Download link ORM model."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from database import Base


class DownloadLinkModel(Base):
    __tablename__ = "download_links"

    id = Column(String, primary_key=True)
    file_id = Column(
        String, ForeignKey("files.id", ondelete="CASCADE"), nullable=False, index=True
    )
    code = Column(String, unique=True, nullable=False, index=True)
    max_downloads = Column(Integer, nullable=True)  # NULL means unlimited
    current_downloads = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
