"""Upload codes repository — data access layer."""

from datetime import timedelta

from sqlalchemy import delete, or_, select, update
from sqlalchemy.orm import Session

from config import DEFAULT_CODE_MAX_FILE_SIZE_MB
from tokens import new_id, new_token
from api.codes.dto.upload_code import UploadCodeResponse
from api.codes.orm.upload_code_model import UploadCodeModel
from api.files.orm.file_model import FileModel

CODE_LENGTH = 10


def _model_to_dto(model: UploadCodeModel) -> UploadCodeResponse:
    return UploadCodeResponse(
        id=model.id,
        code=model.code,
        max_uses=model.max_uses,
        current_uses=model.current_uses or 0,
        max_file_size_mb=model.max_file_size_mb,
        created_at=model.created_at,
        expires_at=model.expires_at,
        is_active=bool(model.is_active),
    )


def _consumable(now):
    return (
        UploadCodeModel.is_active == True,  # noqa: E712
        UploadCodeModel.current_uses < UploadCodeModel.max_uses,
        UploadCodeModel.expires_at > now,
    )


class CodesRepository:
    def __init__(self, store):
        self._store = store

    def _unique_code(self, session: Session) -> str:
        while True:
            code = new_token(CODE_LENGTH)
            taken = session.scalar(select(UploadCodeModel.id).where(UploadCodeModel.code == code))
            if taken is None:
                return code

    def create(
        self,
        max_uses: int = 1,
        max_file_size_mb: int | None = None,
        expires_in_hours: int = 24,
    ) -> UploadCodeResponse:
        if max_uses < 1:
            raise ValueError("max_uses must be at least 1")
        if max_file_size_mb is None:
            max_file_size_mb = DEFAULT_CODE_MAX_FILE_SIZE_MB

        now = self._store.now()
        with self._store.session() as session:
            model = UploadCodeModel(
                id=new_id(),
                code=self._unique_code(session),
                max_uses=max_uses,
                current_uses=0,
                max_file_size_mb=max_file_size_mb,
                created_at=now,
                expires_at=now + timedelta(hours=expires_in_hours),
                is_active=True,
            )
            session.add(model)
            session.flush()
            return _model_to_dto(model)

    def get(self, code_id: str) -> UploadCodeResponse | None:
        with self._store.session() as session:
            model = session.get(UploadCodeModel, code_id)
            return _model_to_dto(model) if model else None

    def validate(self, code: str) -> UploadCodeResponse | None:
        """Return the code only while it can still be consumed."""
        now = self._store.now()
        with self._store.session() as session:
            model = session.scalar(
                select(UploadCodeModel).where(UploadCodeModel.code == code, *_consumable(now))
            )
            return _model_to_dto(model) if model else None

    def increment_use(self, code_id: str) -> None:
        """Unconditional +1; the caller is responsible for having validated."""
        with self._store.session() as session:
            session.execute(
                update(UploadCodeModel)
                .where(UploadCodeModel.id == code_id)
                .values(current_uses=UploadCodeModel.current_uses + 1)
                .execution_options(synchronize_session=False)
            )

    def consume_in(self, session: Session, code_id: str) -> bool:
        now = self._store.now()
        result = session.execute(
            update(UploadCodeModel)
            .where(UploadCodeModel.id == code_id, *_consumable(now))
            .values(current_uses=UploadCodeModel.current_uses + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def consume(self, code_id: str) -> bool:
        """Take one use if any remain. Returns whether the use was taken."""
        with self._store.session() as session:
            return self.consume_in(session, code_id)

    def purge_stale(self) -> int:
        """Delete exhausted, expired or deactivated codes no file refers to."""
        now = self._store.now()
        with self._store.session() as session:
            result = session.execute(
                delete(UploadCodeModel)
                .where(
                    or_(
                        UploadCodeModel.is_active == False,  # noqa: E712
                        UploadCodeModel.current_uses >= UploadCodeModel.max_uses,
                        UploadCodeModel.expires_at <= now,
                    ),
                    UploadCodeModel.id.not_in(
                        select(FileModel.upload_code_id).where(FileModel.upload_code_id.is_not(None))
                    ),
                )
                .execution_options(synchronize_session=False)
            )
            return result.rowcount or 0
