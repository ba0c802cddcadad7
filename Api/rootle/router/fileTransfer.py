from fastapi import APIRouter, UploadFile, File, Form
from fastapi.responses import FileResponse
from rootle.core.deps import FileStoreDep, BlobStoreDep, CurrentUser
from rootle.services.FileService import FileService
from rootle.models.File import File as FileRecord, UploadResponse


router = APIRouter()
file_service = FileService()


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_file(store: FileStoreDep,
                      blobs: BlobStoreDep,
                      current_user: CurrentUser,
                      file: UploadFile | None = File(default=None),
                      faculty: str = Form(default=""),
                      department: str = Form(default="")):

    # reject by the declared size before the body is read into memory
    file_service.validate_upload(
        has_file=file is not None,
        original_name=file.filename if file is not None else None,
        mime_type=file.content_type if file is not None else None,
        faculty=faculty,
        department=department,
        size=file.size if file is not None else None,
    )
    file_data = await file.read()
    return file_service.upload_file(
        store=store,
        blobs=blobs,
        username=current_user,
        file_data=file_data,
        original_name=file.filename,
        mime_type=file.content_type,
        faculty=faculty,
        department=department,
    )


@router.get("/my-files")
async def get_my_files(store: FileStoreDep, current_user: CurrentUser,
                       faculty: str | None = None, department: str | None = None) -> list[FileRecord]:
    return file_service.get_my_files(store=store, username=current_user, faculty=faculty, department=department)


@router.get("/all-files")
async def get_all_files(store: FileStoreDep, current_user: CurrentUser,
                        faculty: str | None = None, department: str | None = None) -> list[FileRecord]:
    return file_service.get_all_files(store=store, faculty=faculty, department=department)


# Public on purpose: any holder of a storage key can download the blob.
@router.get("/download/{storage_key}")
async def download_file(blobs: BlobStoreDep, storage_key: str):
    path = file_service.download_file(blobs=blobs, storage_key=storage_key)
    return FileResponse(path=path, filename=storage_key)
