from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from ..application.services import DeleteService, UploadService
from ..dependencies import get_delete_service, get_upload_service
from ..schemas.photos import DeleteResponse, UploadResponse

router = APIRouter(tags=["Photos"])
delete_router = APIRouter(tags=["Photos"])


@router.post("/upload", response_model=UploadResponse)
def upload_photo(photo: Optional[UploadFile] = File(None), service: UploadService = Depends(get_upload_service)):
    result = service.upload(photo)
    return UploadResponse(
        success=result.success,
        message="Upload successful",
        filename=result.name,
        size=result.size_bytes,
        url=result.public_url,
    )


@delete_router.delete("/delete/{filename}", response_model=DeleteResponse)
def delete_photo(filename: str, service: DeleteService = Depends(get_delete_service)):
    service.delete(filename)
    return DeleteResponse(success=True, message="File deleted")
