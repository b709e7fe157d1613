"""Panels controller — bot panel message registration."""

from fastapi import APIRouter, Depends

from auth import require_admin
from deps import get_store
from store import Store
from api.panels.dto.panel import PanelResponse, PanelUpsert

router = APIRouter(prefix="/api/panels", tags=["Panels"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[PanelResponse])
async def list_panels(store: Store = Depends(get_store)):
    return store.panels.list_all()


@router.put("", response_model=PanelResponse)
async def upsert_panel(data: PanelUpsert, store: Store = Depends(get_store)):
    return store.panels.upsert(data.guild_id, data.channel_id, data.message_id)
