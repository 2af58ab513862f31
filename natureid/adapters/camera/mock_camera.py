"""Mock camera: serves synthetic gradient frames, or refuses access when available=False."""
import numpy as np
from natureid.adapters.camera.base import CameraAdapter, CameraStream, MediaTrack
from natureid.orchestrator.errors import CameraUnavailableError

class MockTrack(MediaTrack):
    def _release(self):
        pass

class MockStream(CameraStream):
    def __init__(self, video_size: tuple[int, int]):
        super().__init__(tracks=[MockTrack()], video_size=video_size)
        self._tick = 0

    def read_frame(self):
        if self.active_tracks == 0:
            return None
        w, h = self.video_size
        self._tick = (self._tick + 8) % 256
        row = np.linspace(0, 255, w, dtype=np.uint8)
        frame = np.zeros((h, w, 3), dtype=np.uint8)
        frame[:, :, 0] = row
        frame[:, :, 1] = self._tick
        frame[:, :, 2] = row[::-1]
        return frame

class MockCamera(CameraAdapter):
    def __init__(self, status_store, available: bool = True, video_size: tuple[int, int] = (640, 480)):
        self.status = status_store
        self.available = available
        self.video_size = video_size
        self.opened: list[MockStream] = []

    def open_stream(self, facing_mode: str = "environment") -> CameraStream:
        if not self.available:
            self.status.log("mock_camera: permission denied")
            raise CameraUnavailableError("permission denied")
        stream = MockStream(self.video_size)
        self.opened.append(stream)
        self.status.log(f"mock_camera: streaming {self.video_size[0]}x{self.video_size[1]} ({facing_mode})")
        return stream
