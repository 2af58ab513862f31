"""
File picker, drag-and-drop and browser-encoded images.

Every path validates against ALLOWED_MIME_TYPES. A rejected file raises an
alert on the status store and leaves the session untouched; an accepted one
is encoded once and handed to on_image_ready.
"""
from typing import Callable, Optional
from natureid.orchestrator.contracts import ALLOWED_MIME_TYPES, EncodedImage, parse_data_uri
from natureid.orchestrator.errors import INVALID_FILE_MESSAGE, InvalidImageError

class ImageUploader:
    def __init__(self, status_store, on_image_ready: Callable[[EncodedImage], object]):
        self.status = status_store
        self.on_image_ready = on_image_ready
        self.last_outcome = None    # what on_image_ready returned for the latest gesture

    def _reject(self, reason: str) -> None:
        self.last_outcome = None
        self.status.log(f"uploader: rejected ({reason})")
        self.status.alert(INVALID_FILE_MESSAGE)
        return None

    def _emit(self, image: EncodedImage) -> EncodedImage:
        self.last_outcome = self.on_image_ready(image)
        return image

    def select_file(self, content: bytes, mime_type: Optional[str], filename: Optional[str] = None) -> Optional[EncodedImage]:
        mime = (mime_type or "").lower()
        if mime not in ALLOWED_MIME_TYPES:
            return self._reject(f"type={mime or 'unknown'} name={filename}")
        self.status.log(f"uploader: accepted {filename or 'file'} type={mime} size={len(content)}")
        return self._emit(EncodedImage.from_bytes(content, mime))

    def accept_data_uri(self, data_uri: str) -> Optional[EncodedImage]:
        try:
            mime, _ = parse_data_uri(data_uri)
        except InvalidImageError as e:
            return self._reject(str(e))
        if mime not in ALLOWED_MIME_TYPES:
            return self._reject(f"data uri type={mime}")
        self.status.log(f"uploader: accepted data uri type={mime}")
        return self._emit(EncodedImage(data_uri=data_uri))

    def drag_enter(self):
        self.status.drag_active = True

    def drag_leave(self):
        self.status.drag_active = False

    def drop(self, files: list[tuple[bytes, Optional[str], Optional[str]]]) -> Optional[EncodedImage]:
        """files: (content, mime_type, filename); only the first one is used."""
        self.status.drag_active = False
        if not files:
            self.last_outcome = None
            self.status.log("uploader: drop without files")
            return None
        content, mime_type, filename = files[0]
        return self.select_file(content, mime_type, filename=filename)
