# camgallery/schemas/photos.py
from pydantic import BaseModel


class UploadResponse(BaseModel):
    success: bool = True
    message: str
    filename: str
    size: int
    url: str


class DeleteResponse(BaseModel):
    success: bool = True
    message: str


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    storage_backend: str
    timestamp: str
