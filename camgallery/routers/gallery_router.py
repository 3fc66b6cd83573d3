from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse

from ..application.services import GalleryService
from ..core.config import Settings
from ..dependencies import get_app_settings, get_gallery_service
from ..exceptions import InternalError

router = APIRouter(tags=["Gallery"])

INDEX_HTML = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>{title}</title>
  </head>
  <body>
    <h1>{title}</h1>
    <p>Send photos with <code>POST /upload</code> as <code>multipart/form-data</code> using the field <code>photo</code>.</p>
    <p>Accepted types: {extensions}. Maximum size: {max_mb} MB.</p>
    <p><a href="/gallery">View the gallery</a></p>
  </body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
def index(settings: Settings = Depends(get_app_settings)):
    return INDEX_HTML.format(
        title=settings.APP_NAME,
        extensions=", ".join(sorted(settings.allowed_extensions_set)),
        max_mb=settings.MAX_FILE_SIZE // (1024 * 1024),
    )


@router.get("/gallery", response_class=HTMLResponse)
def gallery(service: GalleryService = Depends(get_gallery_service)):
    try:
        return HTMLResponse(service.render())
    except InternalError:
        return PlainTextResponse("Error reading photos", status_code=500)
