"""Bot panel ORM model."""

from sqlalchemy import Column, DateTime, String, UniqueConstraint

from database import Base


class PanelModel(Base):
    __tablename__ = "discord_panels"
    __table_args__ = (UniqueConstraint("guild_id", "channel_id"),)

    id = Column(String, primary_key=True)
    guild_id = Column(String, nullable=False)
    channel_id = Column(String, nullable=False)
    message_id = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False)
