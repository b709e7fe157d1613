"""Panel Data Transfer Objects."""

from datetime import datetime

from pydantic import BaseModel


class PanelResponse(BaseModel):
    id: str
    guild_id: str
    channel_id: str
    message_id: str
    created_at: datetime


class PanelUpsert(BaseModel):
    guild_id: str
    channel_id: str
    message_id: str
