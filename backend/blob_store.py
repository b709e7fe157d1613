"""Local filesystem blob store.

Blobs are addressed by an opaque key: a random id plus the original file
extension, stored flat under the upload directory.
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO

from errors import StorageIOError
from tokens import new_id

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1MB


class BlobNotFound(FileNotFoundError):
    pass


class LocalBlobStore:
    def __init__(self, root: Path | str):
        self.root = Path(root)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"Failed to create storage directory: {e}") from e

    def new_key(self, filename: str) -> str:
        return f"{new_id()}{Path(filename).suffix.lower()}"

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if path.parent != self.root.resolve():
            raise BlobNotFound(key)
        return path

    def write(self, key: str, stream: BinaryIO) -> str:
        """Copy ``stream`` into the blob at ``key``; the blob appears atomically."""
        path = self._path(key)
        tmp = tempfile.NamedTemporaryFile(delete=False, dir=str(self.root), prefix=".upload-")
        try:
            with tmp:
                shutil.copyfileobj(stream, tmp, CHUNK_SIZE)
            os.replace(tmp.name, path)
        except OSError as e:
            Path(tmp.name).unlink(missing_ok=True)
            raise StorageIOError(f"Failed to write blob {key}: {e}") from e
        return key

    def open(self, key: str) -> Path:
        path = self._path(key)
        if not path.is_file():
            raise BlobNotFound(key)
        return path

    def exists(self, key: str) -> bool:
        try:
            return self._path(key).is_file()
        except BlobNotFound:
            return False

    def delete(self, key: str) -> bool:
        """Remove a blob. Returns False if it was already gone."""
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageIOError(f"Failed to delete blob {key}: {e}") from e
        return True
