"""
OpenCV webcam capture adapter.
CAMERA_INDEX env var (default 0) selects the rear ("environment") device,
CAMERA_INDEX_USER the front one (defaults to CAMERA_INDEX).
"""
import os
import cv2
from natureid.adapters.camera.base import CameraAdapter, CameraStream, MediaTrack
from natureid.orchestrator.errors import CameraUnavailableError

class CV2VideoTrack(MediaTrack):
    def __init__(self, cap):
        super().__init__()
        self.cap = cap

    def _release(self):
        if self.cap.isOpened():
            self.cap.release()

class CV2Stream(CameraStream):
    def __init__(self, cap):
        w = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)) or 640
        h = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)) or 480
        self._track = CV2VideoTrack(cap)
        super().__init__(tracks=[self._track], video_size=(w, h))

    def read_frame(self):
        if self._track.ready_state != "live":
            return None
        ret, frame = self._track.cap.read()
        if not ret or frame is None:
            return None
        return frame

class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int | None = None):
        self.status = status_store
        self._index = index if index is not None else int(os.getenv("CAMERA_INDEX", "0"))
        self._user_index = int(os.getenv("CAMERA_INDEX_USER", str(self._index)))

    def device_for(self, facing_mode: str) -> int:
        return self._user_index if facing_mode == "user" else self._index

    def open_stream(self, facing_mode: str = "environment") -> CameraStream:
        index = self.device_for(facing_mode)
        cap = cv2.VideoCapture(index)
        if not cap.isOpened():
            cap.release()
            self.status.log(f"cv2_camera: failed to open device {index}")
            raise CameraUnavailableError(f"camera device {index} unavailable")
        self.status.log(f"cv2_camera: opened device {index} ({facing_mode})")
        return CV2Stream(cap)
