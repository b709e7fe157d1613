"""Upload repository — records a finished upload in one transaction."""

from errors import InvalidOrExpiredCode
from api.files.dto.file import FileMeta, FileResponse
from api.files.repositories.files_repository import _model_to_dto as _file_to_dto
from api.links.dto.download_link import DownloadLinkResponse
from api.links.repositories.links_repository import _model_to_dto as _link_to_dto


class UploadRepository:
    def __init__(self, store):
        self._store = store

    def record(
        self,
        meta: FileMeta,
        retention_days: int | None = None,
        upload_code_id: str | None = None,
    ) -> tuple[FileResponse, DownloadLinkResponse]:
        """Consume the code (if any), create the file and its unlimited link.

        Raises InvalidOrExpiredCode, with nothing written, when the code's
        last use was taken by a concurrent upload.
        """
        store = self._store
        with store.session() as session:
            if upload_code_id is not None and not store.codes.consume_in(session, upload_code_id):
                raise InvalidOrExpiredCode()
            file_model = store.files.add(session, meta, retention_days, upload_code_id)
            link_model = store.links.add(session, file_model.id)
            return _file_to_dto(file_model), _link_to_dto(link_model)
