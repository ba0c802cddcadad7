import logging
from pathlib import Path

from rootle.core.db import Collection
from rootle.core.errors import (
    MissingFile, MissingClassification, UnsupportedType, FileTooLarge,
)
from rootle.core.settings import settings
from rootle.core.storage import BlobStore
from rootle.models.File import File, FileFilter, FileSummary, UploadResponse

logger = logging.getLogger(__name__)


class FileService:

    ALLOWED_MIME_TYPES = {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }

    def __init__(self, max_upload_size: int | None = None):
        self.max_upload_size = max_upload_size or settings.MAX_UPLOAD_SIZE

    def is_allowed_type(self, mime_type: str | None) -> bool:
        if not mime_type:
            return False
        mime_type = mime_type.lower()
        return mime_type in self.ALLOWED_MIME_TYPES or mime_type.startswith("image/")

    def validate_upload(
        self,
        *,
        has_file: bool,
        original_name: str | None,
        mime_type: str | None,
        faculty: str | None,
        department: str | None,
        size: int | None,
    ) -> None:
        if not has_file or not original_name:
            raise MissingFile()
        if not faculty or not department:
            raise MissingClassification()
        if not self.is_allowed_type(mime_type):
            raise UnsupportedType()
        if size is not None and size > self.max_upload_size:
            raise FileTooLarge()

    def upload_file(
        self,
        *,
        store: Collection[File],
        blobs: BlobStore,
        username: str,
        file_data: bytes | None,
        original_name: str | None,
        mime_type: str | None,
        faculty: str | None,
        department: str | None,
    ) -> UploadResponse:
        # everything is validated before the first write
        self.validate_upload(
            has_file=file_data is not None,
            original_name=original_name,
            mime_type=mime_type,
            faculty=faculty,
            department=department,
            size=len(file_data) if file_data is not None else None,
        )

        storage_key = blobs.save(file_data, original_name)
        record = File(
            original_name=original_name,
            storage_key=storage_key,
            uploader=username,
            mime_type=mime_type,
            size=len(file_data),
            faculty=faculty,
            department=department,
        )
        try:
            store.append_one(record)
        except Exception:
            blobs.remove(storage_key)
            raise

        logger.info("User %s uploaded %s as %s", username, original_name, storage_key)
        return UploadResponse(
            message="File uploaded successfully",
            file=FileSummary.model_validate(record.model_dump()),
        )

    def get_files(self, *, store: Collection[File], file_filter: FileFilter) -> list[File]:
        return store.query_by(file_filter.matches)

    def get_my_files(
        self,
        *,
        store: Collection[File],
        username: str,
        faculty: str | None = None,
        department: str | None = None,
    ) -> list[File]:
        return self.get_files(
            store=store,
            file_filter=FileFilter(owner=username, faculty=faculty, department=department),
        )

    def get_all_files(
        self,
        *,
        store: Collection[File],
        faculty: str | None = None,
        department: str | None = None,
    ) -> list[File]:
        return self.get_files(
            store=store,
            file_filter=FileFilter(faculty=faculty, department=department),
        )

    def download_file(self, *, blobs: BlobStore, storage_key: str) -> Path:
        path = blobs.path_for(storage_key)
        logger.info("Serving download %s", storage_key)
        return path
