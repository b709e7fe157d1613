"""Download links repository — data access layer."""

from datetime import timedelta

from sqlalchemy import delete, or_, select, update
from sqlalchemy.orm import Session

from errors import NotFound
from tokens import new_id, new_token
from api.files.dto.file import FileResponse
from api.files.orm.file_model import FileModel
from api.files.repositories.files_repository import _model_to_dto as _file_to_dto
from api.links.dto.download_link import DownloadLinkResponse
from api.links.orm.download_link_model import DownloadLinkModel

CODE_LENGTH = 12


def _model_to_dto(model: DownloadLinkModel) -> DownloadLinkResponse:
    return DownloadLinkResponse(
        id=model.id,
        file_id=model.file_id,
        code=model.code,
        max_downloads=model.max_downloads,
        current_downloads=model.current_downloads or 0,
        created_at=model.created_at,
        expires_at=model.expires_at,
        is_active=bool(model.is_active),
    )


def _consumable(now):
    """Link predicates shared by lookup and consumption."""
    return (
        DownloadLinkModel.is_active == True,  # noqa: E712
        or_(
            DownloadLinkModel.max_downloads.is_(None),
            DownloadLinkModel.current_downloads < DownloadLinkModel.max_downloads,
        ),
        or_(DownloadLinkModel.expires_at.is_(None), DownloadLinkModel.expires_at > now),
    )


class LinksRepository:
    def __init__(self, store):
        self._store = store

    def _unique_code(self, session: Session) -> str:
        while True:
            code = new_token(CODE_LENGTH)
            taken = session.scalar(
                select(DownloadLinkModel.id).where(DownloadLinkModel.code == code)
            )
            if taken is None:
                return code

    def add(
        self,
        session: Session,
        file_id: str,
        max_downloads: int | None = None,
        expires_in_hours: int | None = None,
    ) -> DownloadLinkModel:
        """Insert a link row inside the caller's transaction."""
        if max_downloads is not None and max_downloads < 1:
            raise ValueError("max_downloads must be at least 1")
        if session.get(FileModel, file_id) is None:
            raise NotFound(f"File {file_id} not found")

        now = self._store.now()
        model = DownloadLinkModel(
            id=new_id(),
            file_id=file_id,
            code=self._unique_code(session),
            max_downloads=max_downloads,
            current_downloads=0,
            created_at=now,
            expires_at=now + timedelta(hours=expires_in_hours) if expires_in_hours else None,
            is_active=True,
        )
        session.add(model)
        session.flush()
        return model

    def create(
        self,
        file_id: str,
        max_downloads: int | None = None,
        expires_in_hours: int | None = None,
    ) -> DownloadLinkResponse:
        """New link for a file. ``max_downloads=None`` means unlimited."""
        with self._store.session() as session:
            model = self.add(session, file_id, max_downloads, expires_in_hours)
            return _model_to_dto(model)

    def get(self, link_id: str) -> DownloadLinkResponse | None:
        with self._store.session() as session:
            model = session.get(DownloadLinkModel, link_id)
            return _model_to_dto(model) if model else None

    def get_file_by_code(
        self, code: str
    ) -> tuple[FileResponse, DownloadLinkResponse] | None:
        """Resolve a link code to its file, only while both are consumable."""
        now = self._store.now()
        with self._store.session() as session:
            row = session.execute(
                select(FileModel, DownloadLinkModel)
                .join(DownloadLinkModel, DownloadLinkModel.file_id == FileModel.id)
                .where(
                    DownloadLinkModel.code == code,
                    *_consumable(now),
                    FileModel.expires_at > now,
                )
            ).first()
            if row is None:
                return None
            file_model, link_model = row
            return _file_to_dto(file_model), _model_to_dto(link_model)

    def increment_download(self, link_id: str) -> None:
        with self._store.session() as session:
            session.execute(
                update(DownloadLinkModel)
                .where(DownloadLinkModel.id == link_id)
                .values(current_downloads=DownloadLinkModel.current_downloads + 1)
                .execution_options(synchronize_session=False)
            )

    def consume(self, link_id: str) -> bool:
        """Count one download if the link is still consumable.

        Returns False when another request exhausted the budget, or the link
        or its file expired, since the caller resolved it.
        """
        now = self._store.now()
        live_files = select(FileModel.id).where(FileModel.expires_at > now)
        with self._store.session() as session:
            result = session.execute(
                update(DownloadLinkModel)
                .where(
                    DownloadLinkModel.id == link_id,
                    *_consumable(now),
                    DownloadLinkModel.file_id.in_(live_files),
                )
                .values(current_downloads=DownloadLinkModel.current_downloads + 1)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1

    def list_for_file(self, file_id: str) -> list[DownloadLinkResponse]:
        with self._store.session() as session:
            models = session.scalars(
                select(DownloadLinkModel)
                .where(
                    DownloadLinkModel.file_id == file_id,
                    DownloadLinkModel.is_active == True,  # noqa: E712
                )
                .order_by(DownloadLinkModel.created_at.desc())
            ).all()
            return [_model_to_dto(m) for m in models]

    def get_admin_link(self, file_id: str) -> DownloadLinkResponse | None:
        """The file's first active unlimited link."""
        with self._store.session() as session:
            model = session.scalar(
                select(DownloadLinkModel)
                .where(
                    DownloadLinkModel.file_id == file_id,
                    DownloadLinkModel.max_downloads.is_(None),
                    DownloadLinkModel.is_active == True,  # noqa: E712
                )
                .order_by(DownloadLinkModel.created_at)
                .limit(1)
            )
            return _model_to_dto(model) if model else None

    def total_downloads(self) -> int:
        with self._store.session() as session:
            counts = session.scalars(select(DownloadLinkModel.current_downloads)).all()
            return sum(counts)

    def purge_inactive(self) -> int:
        """Delete links that can never be served again."""
        now = self._store.now()
        with self._store.session() as session:
            result = session.execute(
                delete(DownloadLinkModel)
                .where(
                    or_(
                        DownloadLinkModel.is_active == False,  # noqa: E712
                        DownloadLinkModel.expires_at <= now,
                        DownloadLinkModel.current_downloads >= DownloadLinkModel.max_downloads,
                    )
                )
                .execution_options(synchronize_session=False)
            )
            return result.rowcount or 0
