"""Flat-file persistence.

Each collection is a single JSON array document. Every mutation reads the
whole document, appends one item and rewrites the document, so writes cost
O(n) and are only suitable for small data sets.
"""
import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import ValidationError
from sqlmodel import SQLModel

from rootle.core.errors import StoreIOFailure
from rootle.core.settings import settings
from rootle.models.File import File
from rootle.models.User import User

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class Collection(ABC, Generic[ModelT]):
    """Key-indexed persistent collection."""

    key: str

    @abstractmethod
    def read_all(self) -> list[ModelT]:
        ...

    @abstractmethod
    def append_one(
        self,
        record: ModelT,
        guard: Callable[[list[ModelT]], None] | None = None,
    ) -> ModelT:
        ...

    def query_by(self, predicate: Callable[[ModelT], bool]) -> list[ModelT]:
        return [record for record in self.read_all() if predicate(record)]

    def get(self, key_value) -> ModelT | None:
        for record in self.read_all():
            if getattr(record, self.key) == key_value:
                return record
        return None


class JsonCollection(Collection[ModelT]):
    """Collection persisted as a JSON array on disk.

    Appends within one process are serialized by a lock and the document is
    replaced atomically. Separate processes writing the same document can
    still lose each other's updates.
    """

    def __init__(self, path: Path | str, model: type[ModelT], key: str):
        self.path = Path(path)
        self.model = model
        self.key = key
        self._lock = threading.Lock()

    def init(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self._write([])
        except OSError as e:
            logger.exception("Could not initialise %s", self.path)
            raise StoreIOFailure() from e

    def _read(self) -> list[ModelT]:
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            logger.warning("%s not found, treating it as empty", self.path.name)
            return []
        except (OSError, ValueError) as e:
            logger.exception("Error reading %s", self.path)
            raise StoreIOFailure() from e

        if not isinstance(raw, list):
            logger.error("%s does not hold a JSON array", self.path)
            raise StoreIOFailure()
        try:
            return [self.model.model_validate(item) for item in raw]
        except ValidationError as e:
            logger.exception("Malformed record in %s", self.path)
            raise StoreIOFailure() from e

    def _write(self, records: list[ModelT]) -> None:
        payload = [record.model_dump(mode="json") for record in records]
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def read_all(self) -> list[ModelT]:
        return self._read()

    def append_one(
        self,
        record: ModelT,
        guard: Callable[[list[ModelT]], None] | None = None,
    ) -> ModelT:
        """Persist ``record`` after the current items.

        ``guard`` sees the current items under the write lock and may raise
        to abort the append.
        """
        with self._lock:
            records = self._read()
            if guard is not None:
                guard(records)
            records.append(record)
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._write(records)
            except OSError as e:
                logger.exception("Error writing %s", self.path)
                raise StoreIOFailure() from e
        return record


def build_user_store(path: Path | str | None = None) -> JsonCollection[User]:
    return JsonCollection(path or settings.USERS_FILE, User, key="username")


def build_file_store(path: Path | str | None = None) -> JsonCollection[File]:
    return JsonCollection(path or settings.FILES_FILE, File, key="id")


user_store = build_user_store()
file_store = build_file_store()


def init_db():
    user_store.init()
    file_store.init()
    logger.info("Data stores ready in %s", settings.DATA_DIR)
