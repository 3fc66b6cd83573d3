from .photos import DeleteResponse, HealthResponse, UploadResponse

__all__ = ["DeleteResponse", "HealthResponse", "UploadResponse"]
