"""
Live camera capture: start -> (preview)* -> capture | cancel.

The stream is stopped on every exit: capture, cancel, close (app shutdown)
and a failed start. capture() consumes the stream, so one gesture emits at
most one image.
"""
from typing import Callable, Optional
import cv2
from natureid.orchestrator.contracts import EncodedImage
from natureid.orchestrator.errors import CAMERA_UNAVAILABLE_MESSAGE, CAPTURE_FAILED_MESSAGE

JPEG_QUALITY = 85


def rasterize(frame, video_size: tuple[int, int]) -> bytes | None:
    """Draw frame onto a buffer of the stream's video size and encode it as JPEG."""
    w, h = video_size
    if frame.shape[1] != w or frame.shape[0] != h:
        frame = cv2.resize(frame, (w, h))
    ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, JPEG_QUALITY])
    if not ok:
        return None
    return bytes(buf)


class CameraCapture:
    def __init__(self, camera, status_store, on_image_ready: Callable[[EncodedImage], object]):
        self.camera = camera
        self.status = status_store
        self.on_image_ready = on_image_ready
        self.stream = None
        self.last_outcome = None    # what on_image_ready returned for the latest capture

    @property
    def capturing(self) -> bool:
        return self.stream is not None

    def start(self, facing_mode: str = "environment") -> bool:
        if self.stream is not None:
            return True
        self.status.capturing = True
        try:
            self.stream = self.camera.open_stream(facing_mode=facing_mode)
        except Exception as e:
            self.status.log(f"capture: camera error {type(e).__name__}: {e}")
            self.stream = None
            self.status.capturing = False
            self.status.alert(CAMERA_UNAVAILABLE_MESSAGE)
            return False
        self.status.log(f"capture: streaming {self.stream.video_size[0]}x{self.stream.video_size[1]}")
        return True

    def preview_jpeg(self) -> bytes | None:
        if self.stream is None:
            return None
        frame = self.stream.read_frame()
        if frame is None:
            return None
        return rasterize(frame, self.stream.video_size)

    def capture(self) -> Optional[EncodedImage]:
        self.last_outcome = None
        stream, self.stream = self.stream, None
        if stream is None:
            self.status.log("capture: not streaming, ignored")
            return None
        try:
            frame = stream.read_frame()
            jpeg = rasterize(frame, stream.video_size) if frame is not None else None
        finally:
            self._release(stream)

        if jpeg is None:
            self.status.log("capture: no frame available")
            self.status.alert(CAPTURE_FAILED_MESSAGE)
            return None
        image = EncodedImage.from_bytes(jpeg, "image/jpeg")
        self.status.log(f"capture: snapshot {len(jpeg)} bytes")
        self.last_outcome = self.on_image_ready(image)
        return image

    def cancel(self):
        stream, self.stream = self.stream, None
        if stream is not None:
            self.status.log("capture: cancelled")
            self._release(stream)
        self.status.capturing = False

    def close(self):
        self.cancel()

    def _release(self, stream):
        stream.stop()
        self.status.capturing = False
        self.status.log(f"capture: stream released, active_tracks={stream.active_tracks}")
