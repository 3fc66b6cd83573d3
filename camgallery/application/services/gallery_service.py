import logging
from dataclasses import dataclass, field
from datetime import timezone
from html import escape
from typing import FrozenSet, List

from ..ports.storage_repo import StorageRepository, StoredImage
from ...exceptions import InternalError, StorageError
from ...utils import extension_of

logger = logging.getLogger(__name__)

EMPTY_GALLERY_MESSAGE = "No photos yet. Upload some from your ESP32!"


@dataclass
class GalleryView:
    images: List[StoredImage] = field(default_factory=list)
    delete_enabled: bool = False

    @property
    def count(self) -> int:
        return len(self.images)


@dataclass
class GalleryService:
    storage_repo: StorageRepository
    allowed_extensions: FrozenSet[str]
    delete_enabled: bool = False
    title: str = "ESP32-CAM Photo Gallery"

    def build_view(self) -> GalleryView:
        """Current photos, newest first. Recomputed on every call."""
        try:
            stored = self.storage_repo.list()
        except StorageError as e:
            logger.error(f"Gallery listing failed: {e}")
            raise InternalError("Error reading photos", error=str(e))

        images = [img for img in stored if extension_of(img.name) in self.allowed_extensions]
        images.sort(key=lambda img: img.created_at, reverse=True)
        return GalleryView(images=images, delete_enabled=self.delete_enabled)

    def render(self) -> str:
        return render_gallery_html(self.build_view(), self.title)


def _format_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


def _render_card(image: StoredImage, delete_enabled: bool) -> str:
    name = escape(image.name)
    src = escape(image.url)
    uploaded = image.created_at.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    delete_button = ""
    if delete_enabled:
        delete_button = f'<button class="delete" data-name="{name}" onclick="deletePhoto(this)">Delete</button>'
    return f"""
      <div class="photo" data-name="{name}">
        <a href="{src}" target="_blank"><img src="{src}" width="300" alt="{name}" loading="lazy"></a>
        <h3>{name}</h3>
        <p>Uploaded: {uploaded}</p>
        <p>Size: {_format_size(image.size_bytes)}</p>
        {delete_button}
      </div>"""


_DELETE_SCRIPT = """
    <script>
      async function deletePhoto(button) {
        const name = button.dataset.name;
        if (!confirm(`Delete ${name}?`)) return;
        const res = await fetch(`/delete/${encodeURIComponent(name)}`, { method: 'DELETE' });
        const body = await res.json();
        if (body.success) {
          window.location.reload();
        } else {
          alert(body.message || 'Delete failed');
        }
      }
    </script>"""


def render_gallery_html(view: GalleryView, title: str) -> str:
    if view.images:
        body = '<div id="photos" class="grid">' + "".join(_render_card(img, view.delete_enabled) for img in view.images) + "\n    </div>"
    else:
        body = f'<p class="empty">{EMPTY_GALLERY_MESSAGE}</p>'
    script = _DELETE_SCRIPT if view.delete_enabled and view.images else ""
    title = escape(title)
    return f"""<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>{title}</title>
    <style>
      body {{ font-family: Arial, sans-serif; padding: 20px; }}
      .grid {{ display: flex; flex-wrap: wrap; }}
      .photo {{ margin: 10px; padding: 15px; border: 1px solid #ddd; border-radius: 6px; }}
      .photo h3 {{ font-size: 14px; }}
      .delete {{ background: #d9534f; color: #fff; border: none; padding: 6px 12px; cursor: pointer; }}
    </style>
  </head>
  <body>
    <h1>{title}</h1>
    <p class="count">Total photos: {view.count}</p>
    {body}{script}
  </body>
</html>
"""
