"""Files repository — data access layer."""

from datetime import timedelta

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from config import DEFAULT_RETENTION_DAYS
from tokens import new_id
from api.files.dto.file import FileMeta, FileResponse
from api.files.orm.file_model import FileModel
from api.links.orm.download_link_model import DownloadLinkModel


def _model_to_dto(model: FileModel) -> FileResponse:
    return FileResponse(
        id=model.id,
        original_name=model.original_name,
        display_name=model.display_name,
        storage_key=model.storage_key,
        byte_size=model.byte_size or 0,
        mime_type=model.mime_type,
        uploaded_by=model.uploaded_by,
        upload_code_id=model.upload_code_id,
        created_at=model.created_at,
        expires_at=model.expires_at,
    )


class FilesRepository:
    def __init__(self, store):
        self._store = store

    def add(
        self,
        session: Session,
        meta: FileMeta,
        retention_days: int | None = None,
        upload_code_id: str | None = None,
    ) -> FileModel:
        """Insert a file row inside the caller's transaction."""
        if retention_days is None:
            retention_days = DEFAULT_RETENTION_DAYS
        if retention_days <= 0:
            raise ValueError("retention_days must be positive")

        now = self._store.now()
        model = FileModel(
            id=new_id(),
            original_name=meta.original_name,
            display_name=meta.display_name or None,
            storage_key=meta.storage_key,
            byte_size=meta.byte_size,
            mime_type=meta.mime_type or None,
            uploaded_by=meta.uploaded_by,
            upload_code_id=upload_code_id,
            created_at=now,
            expires_at=now + timedelta(days=retention_days),
        )
        session.add(model)
        session.flush()
        return model

    def create(
        self,
        meta: FileMeta,
        retention_days: int | None = None,
        upload_code_id: str | None = None,
    ) -> FileResponse:
        with self._store.session() as session:
            model = self.add(session, meta, retention_days, upload_code_id)
            return _model_to_dto(model)

    def get(self, file_id: str) -> FileResponse | None:
        with self._store.session() as session:
            model = session.get(FileModel, file_id)
            return _model_to_dto(model) if model else None

    def list_active(self) -> list[FileResponse]:
        """Unexpired files, newest first."""
        now = self._store.now()
        with self._store.session() as session:
            models = session.scalars(
                select(FileModel)
                .where(FileModel.expires_at > now)
                .order_by(FileModel.created_at.desc())
            ).all()
            return [_model_to_dto(m) for m in models]

    def delete(self, file_id: str) -> bool:
        with self._store.session() as session:
            if session.get(FileModel, file_id) is None:
                return False
            session.execute(
                delete(DownloadLinkModel)
                .where(DownloadLinkModel.file_id == file_id)
                .execution_options(synchronize_session=False)
            )
            session.execute(
                delete(FileModel)
                .where(FileModel.id == file_id)
                .execution_options(synchronize_session=False)
            )
            return True

    def delete_expired(self) -> list[str]:
        """Remove every expired file and its links; return their storage keys.

        Selection and deletion share one locked transaction, so a file is
        either fully servable or fully gone.
        """
        now = self._store.now()
        with self._store.session() as session:
            rows = session.execute(
                select(FileModel.id, FileModel.storage_key).where(FileModel.expires_at <= now)
            ).all()
            if not rows:
                return []

            ids = [row.id for row in rows]
            session.execute(
                delete(DownloadLinkModel)
                .where(DownloadLinkModel.file_id.in_(ids))
                .execution_options(synchronize_session=False)
            )
            session.execute(
                delete(FileModel)
                .where(FileModel.id.in_(ids))
                .execution_options(synchronize_session=False)
            )
            return [row.storage_key for row in rows]

    def total_storage(self) -> int:
        now = self._store.now()
        with self._store.session() as session:
            total = session.scalar(
                select(func.sum(FileModel.byte_size)).where(FileModel.expires_at > now)
            )
            return total or 0
