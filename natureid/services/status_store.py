from dataclasses import dataclass, field
from typing import Optional, List
from natureid.orchestrator.contracts import EncodedImage, IdentificationResult, SessionState

@dataclass
class Notification:
    title: str
    description: str
    variant: str = "destructive"

@dataclass
class StatusStore:
    phase: str = "idle"               # idle | loading | error | success
    image: Optional[EncodedImage] = None
    result: Optional[IdentificationResult] = None
    error: Optional[str] = None
    capturing: bool = False           # owned by CameraCapture
    drag_active: bool = False         # owned by ImageUploader
    generation: int = 0               # bumped on every load/reset, stale calls compare against it
    alerts: List[str] = field(default_factory=list)                  # blocking, read-and-clear
    notifications: List[Notification] = field(default_factory=list)  # toasts, read-and-clear
    logs: List[str] = field(default_factory=list)

    @property
    def loading(self) -> bool:
        return self.phase == "loading"

    def log(self, msg: str):
        self.logs.append(msg)
        if len(self.logs) > 200:
            self.logs = self.logs[-200:]

    def alert(self, msg: str):
        self.alerts.append(msg)
        self.log(f"alert: {msg}")

    def notify(self, title: str, description: str, variant: str = "destructive"):
        self.notifications.append(Notification(title=title, description=description, variant=variant))

    def drain_alerts(self) -> List[str]:
        out, self.alerts = self.alerts, []
        return out

    def drain_notifications(self) -> List[Notification]:
        out, self.notifications = self.notifications, []
        return out

    def begin_loading(self, image: EncodedImage) -> int:
        self.generation += 1
        self.phase = "loading"
        self.image = image
        self.result = None
        self.error = None
        return self.generation

    def is_current(self, ticket: int) -> bool:
        return ticket == self.generation

    def succeed(self, result: IdentificationResult):
        self.phase = "success"
        self.result = result
        self.error = None

    def fail(self, message: str):
        self.phase = "error"
        self.result = None
        self.error = message

    def reset(self):
        self.generation += 1
        self.phase = "idle"
        self.image = None
        self.result = None
        self.error = None

    def session_state(self) -> SessionState:
        phase = self.phase
        if phase == "idle" and self.capturing:
            phase = "capturing"
        return SessionState(phase=phase, image=self.image, result=self.result, error=self.error)
