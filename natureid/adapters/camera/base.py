from abc import ABC, abstractmethod

class MediaTrack(ABC):
    kind = "video"

    def __init__(self):
        self.ready_state = "live"

    def stop(self):
        if self.ready_state == "live":
            self._release()
            self.ready_state = "ended"

    @abstractmethod
    def _release(self):
        ...

class CameraStream(ABC):
    def __init__(self, tracks: list[MediaTrack], video_size: tuple[int, int]):
        self.tracks = tracks
        self.video_size = video_size   # (width, height)

    @property
    def active_tracks(self) -> int:
        return sum(1 for t in self.tracks if t.ready_state == "live")

    def stop(self):
        for t in self.tracks:
            t.stop()

    @abstractmethod
    def read_frame(self):
        """Current BGR frame as a numpy array, or None if no frame is available."""
        ...

class CameraAdapter(ABC):
    @abstractmethod
    def open_stream(self, facing_mode: str = "environment") -> CameraStream:
        """Acquire a live stream. Raises CameraUnavailableError on denial / no device."""
        ...
