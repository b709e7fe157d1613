"""Code/link store — the injected handle that owns the database.

Every operation runs inside ``Store.session()``, which holds one lock for
the duration of the transaction. Read-modify-write sequences (consuming an
upload code, counting a download, sweeping expired files) therefore never
interleave, and no caller ever sees a half-applied change.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from clock import utcnow
from database import init_db, make_engine
from api.codes.repositories.codes_repository import CodesRepository
from api.files.repositories.files_repository import FilesRepository
from api.links.repositories.links_repository import LinksRepository
from api.panels.repositories.panels_repository import PanelsRepository
from api.settings.repositories.settings_repository import SettingsRepository
from api.upload.repositories.upload_repository import UploadRepository

logger = logging.getLogger(__name__)


class Store:
    def __init__(self, url: str, clock: Callable[[], datetime] = utcnow):
        self.url = url
        self.clock = clock
        self.engine: Engine | None = None
        self._session_factory: sessionmaker | None = None
        self._lock = threading.RLock()

        self.files = FilesRepository(self)
        self.codes = CodesRepository(self)
        self.links = LinksRepository(self)
        self.uploads = UploadRepository(self)
        self.panels = PanelsRepository(self)
        self.settings = SettingsRepository(self)

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self) -> "Store":
        if self.is_open:
            return self
        self.engine = make_engine(self.url)
        init_db(self.engine)
        self._session_factory = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info("Store opened (%s)", self.engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("Store closed")

    def now(self) -> datetime:
        return self.clock()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Serialized transaction: commit on success, roll back on error."""
        if self._session_factory is None:
            raise RuntimeError("Store is not open")
        with self._lock:
            session = self._session_factory()
            try:
                yield session
                session.commit()
            except Exception:
                session.rollback()
                raise
            finally:
                session.close()
