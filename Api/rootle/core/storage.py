import logging
import os
import re
import uuid
from pathlib import Path

from rootle.core.errors import NotFound, StoreIOFailure
from rootle.core.settings import settings

logger = logging.getLogger(__name__)


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename to prevent path traversal and special character injection.
    """
    if not filename:
        return "unknown"
    filename = filename.replace('/', '').replace('\\', '').replace('\0', '')
    filename = filename.replace('\r', '').replace('\n', '')
    filename = re.sub(r'[^\w\s\-\.]', '', filename)
    filename = filename.strip().strip('.')
    return filename if filename else "unknown"


# storage keys are "<32 hex>-<name>" and must fit a 255 byte file name
MAX_NAME_BYTES = 255 - 33


def fit_filename(filename: str, limit: int = MAX_NAME_BYTES) -> str:
    """Shortens the stem of ``filename`` so it encodes to at most ``limit`` bytes."""
    if len(filename.encode()) <= limit:
        return filename
    stem, ext = os.path.splitext(filename)
    if len(ext.encode()) >= limit // 2:
        stem, ext = filename, ""
    budget = limit - len(ext.encode())
    stem = stem.encode()[:budget].decode(errors="ignore").rstrip()
    return (stem or "unknown") + ext


class BlobStore:
    """Uploaded bytes, one file per storage key."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def init(self) -> None:
        try:
            self.root.mkdir(exist_ok=True, parents=True)
        except OSError as e:
            logger.exception("Could not create upload directory %s", self.root)
            raise StoreIOFailure() from e

    def save(self, data: bytes, original_name: str) -> str:
        """Writes ``data`` under a new storage key and returns the key."""
        self.init()
        while True:
            key = f"{uuid.uuid4().hex}-{fit_filename(sanitize_filename(original_name))}"
            try:
                # "x" refuses to overwrite, so keys never collide
                with open(self.root / key, "xb") as f:
                    f.write(data)
                return key
            except FileExistsError:
                continue
            except OSError as e:
                logger.exception("Error writing blob %s", key)
                self.remove(key)
                raise StoreIOFailure() from e

    def path_for(self, key: str) -> Path:
        """Resolves a client supplied key to a stored blob."""
        if not key or key != Path(key).name or key in (".", ".."):
            raise NotFound()
        path = self.root / key
        if not path.is_file():
            raise NotFound()
        return path

    def remove(self, key: str) -> None:
        path = self.root / key
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.exception("Could not remove blob %s", key)


blob_store = BlobStore(settings.UPLOAD_DIR)
