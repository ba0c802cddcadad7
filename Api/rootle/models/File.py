from sqlmodel import Field, SQLModel
from datetime import datetime, timezone
import uuid


def generate_uid() -> str:
    """Generate a unique, unguessable identifier."""
    return str(uuid.uuid4())


class File(SQLModel):
    id: str = Field(default_factory=generate_uid)
    original_name: str
    storage_key: str
    uploader: str
    upload_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    mime_type: str
    size: int
    faculty: str
    department: str


class FileSummary(SQLModel):
    id: str
    original_name: str
    uploader: str
    upload_date: datetime
    faculty: str
    department: str


class UploadResponse(SQLModel):
    message: str
    file: FileSummary


class FileFilter(SQLModel):
    owner: str | None = None
    faculty: str | None = None
    department: str | None = None

    def matches(self, record: File) -> bool:
        # empty values leave the field unconstrained
        if self.owner and record.uploader != self.owner:
            return False
        if self.faculty and record.faculty != self.faculty:
            return False
        if self.department and record.department != self.department:
            return False
        return True
