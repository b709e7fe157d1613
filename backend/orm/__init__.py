"""Central ORM module — imports all models for Alembic metadata discovery."""

from api.codes.orm import UploadCodeModel
from api.files.orm import FileModel
from api.links.orm import DownloadLinkModel
from api.panels.orm import PanelModel
from api.settings.orm import SettingModel

__all__ = [
    "DownloadLinkModel",
    "FileModel",
    "PanelModel",
    "SettingModel",
    "UploadCodeModel",
]
