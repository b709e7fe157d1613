"""Setting ORM model — small key/value state such as the last reap time."""

from sqlalchemy import Column, DateTime, String, Text

from database import Base


class SettingModel(Base):
    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime, nullable=True)
