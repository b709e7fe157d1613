"""Panels repository — one tracked bot message per (guild, channel)."""

from sqlalchemy import select

from tokens import new_id
from api.panels.dto.panel import PanelResponse
from api.panels.orm.panel_model import PanelModel


def _model_to_dto(model: PanelModel) -> PanelResponse:
    return PanelResponse(
        id=model.id,
        guild_id=model.guild_id,
        channel_id=model.channel_id,
        message_id=model.message_id,
        created_at=model.created_at,
    )


class PanelsRepository:
    def __init__(self, store):
        self._store = store

    def upsert(self, guild_id: str, channel_id: str, message_id: str) -> PanelResponse:
        with self._store.session() as session:
            model = session.scalar(
                select(PanelModel).filter_by(guild_id=guild_id, channel_id=channel_id)
            )
            if model:
                model.message_id = message_id
            else:
                model = PanelModel(
                    id=new_id(),
                    guild_id=guild_id,
                    channel_id=channel_id,
                    message_id=message_id,
                    created_at=self._store.now(),
                )
                session.add(model)
            session.flush()
            return _model_to_dto(model)

    def get_by_channel(self, guild_id: str, channel_id: str) -> PanelResponse | None:
        with self._store.session() as session:
            model = session.scalar(
                select(PanelModel).filter_by(guild_id=guild_id, channel_id=channel_id)
            )
            return _model_to_dto(model) if model else None

    def list_all(self) -> list[PanelResponse]:
        with self._store.session() as session:
            return [_model_to_dto(m) for m in session.scalars(select(PanelModel)).all()]
