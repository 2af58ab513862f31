import os
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv
from fastapi import FastAPI, File, UploadFile
from fastapi.responses import Response

from natureid.acquirer.capture import CameraCapture
from natureid.acquirer.uploader import ImageUploader
from natureid.orchestrator import errors
from natureid.orchestrator.state_machine import Orchestrator
from natureid.services.models import (
    CameraResponse, DragResponse, IdentifyRequestIn, IdentifySpeciesOut,
    NotificationOut, ResultViewOut, StatusResponse,
)
from natureid.services.status_store import StatusStore
from natureid.web.presenter import present

load_dotenv(dotenv_path="natureid/.env", override=False)


def select_vision(status: StatusStore):
    # VISION_ADAPTER: claude | kimi | mock  (default: claude)
    name = os.getenv("VISION_ADAPTER", "claude").lower()
    if name == "claude":
        from natureid.adapters.vision.claude_vision import ClaudeVision
        vision = ClaudeVision(status)
    elif name == "kimi":
        from natureid.adapters.vision.kimi_vision import KimiVision
        vision = KimiVision(status)
    else:
        vision = None

    if vision is None or not vision._ready:
        from natureid.adapters.vision.mock_vision import MockVision
        if vision is not None:
            status.log(f"vision: {type(vision).__name__} not ready, falling back to mock")
        vision = MockVision(status)
    status.log(f"vision adapter: {type(vision).__name__}")
    return vision


def select_camera(status: StatusStore):
    # CAMERA_ADAPTER: cv2 | mock  (default: cv2)
    if os.getenv("CAMERA_ADAPTER", "cv2").lower() == "mock":
        from natureid.adapters.camera.mock_camera import MockCamera
        camera = MockCamera(status)
    else:
        from natureid.adapters.camera.cv2_camera import CV2Camera
        camera = CV2Camera(status)
    status.log(f"camera adapter: {type(camera).__name__}")
    return camera


@dataclass
class Runtime:
    status: StatusStore
    vision: object
    camera: object
    orch: Orchestrator
    uploader: ImageUploader
    capture: CameraCapture


def init_runtime(status: StatusStore | None = None, vision=None, camera=None) -> Runtime:
    """Wire store, adapters and components. Adapters not passed in come from env."""
    global runtime
    status = status or StatusStore()
    vision = vision or select_vision(status)
    camera = camera or select_camera(status)
    orch = Orchestrator(vision=vision, status_store=status)
    runtime = Runtime(
        status=status,
        vision=vision,
        camera=camera,
        orch=orch,
        uploader=ImageUploader(status, on_image_ready=orch.identify),
        capture=CameraCapture(camera, status, on_image_ready=orch.identify),
    )
    return runtime


runtime = init_runtime()


def shutdown():
    runtime.capture.close()
    if hasattr(runtime.vision, "close"):
        runtime.vision.close()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    shutdown()


app = FastAPI(title="natureid api", lifespan=lifespan)


def status_response(accepted: bool | None = None, error_code: str | None = None,
                    drain_notifications: bool = True) -> StatusResponse:
    st = runtime.status
    state = st.session_state()
    result_out = view_out = None
    if state.result is not None:
        result_out = IdentifySpeciesOut.from_result(state.result)
        if state.image is not None:
            v = present(state.result, state.image.data_uri)
            view_out = ResultViewOut(
                confidence_label=v.confidence_label,
                low_confidence=v.low_confidence,
                venom_badge=v.venom_badge,
            )
    # Read-and-clear: alerts are shown by the script from this response. Toasts are
    # left queued on acquisition responses so the page render that follows shows them.
    notes = st.drain_notifications() if drain_notifications else list(st.notifications)
    return StatusResponse(
        phase=state.phase,
        loading=state.loading,
        capturing=st.capturing,
        drag_active=st.drag_active,
        accepted=accepted,
        error_code=error_code,
        image_data_uri=state.image.data_uri if state.image else None,
        result=result_out,
        view=view_out,
        error=state.error,
        alerts=st.drain_alerts(),
        notifications=[NotificationOut(title=n.title, description=n.description, variant=n.variant)
                       for n in notes],
        logs=st.logs,
    )


def _acquired(image, outcome) -> StatusResponse:
    """accepted: an image was produced and the orchestrator took it on."""
    if image is None:
        return status_response(accepted=False, drain_notifications=False)
    code = outcome.error_code if outcome is not None else None
    return status_response(accepted=code != errors.ERR_BUSY, error_code=code, drain_notifications=False)


@app.get("/status", response_model=StatusResponse)
def get_status():
    return status_response()


@app.post("/upload", response_model=StatusResponse)
def upload(file: UploadFile = File(...)):
    """File picker: validate type, encode, identify."""
    content = file.file.read()
    image = runtime.uploader.select_file(content, file.content_type, filename=file.filename)
    return _acquired(image, runtime.uploader.last_outcome)


@app.post("/drop", response_model=StatusResponse)
def drop(files: List[UploadFile] = File(...)):
    """Drag-and-drop: only the first dropped file is used."""
    first = files[0]
    image = runtime.uploader.drop([(first.file.read(), first.content_type, first.filename)])
    return _acquired(image, runtime.uploader.last_outcome)


@app.post("/drag/enter", response_model=DragResponse)
def drag_enter():
    runtime.uploader.drag_enter()
    return DragResponse(ok=True, drag_active=runtime.status.drag_active)


@app.post("/drag/leave", response_model=DragResponse)
def drag_leave():
    runtime.uploader.drag_leave()
    return DragResponse(ok=True, drag_active=runtime.status.drag_active)


@app.post("/identify", response_model=StatusResponse)
def identify(req: IdentifyRequestIn):
    """Image already encoded by the browser (in-page camera snapshot)."""
    image = runtime.uploader.accept_data_uri(req.photo_data_uri)
    return _acquired(image, runtime.uploader.last_outcome)


@app.post("/camera/start", response_model=CameraResponse)
def camera_start(facing_mode: str = "environment"):
    ok = runtime.capture.start(facing_mode=facing_mode)
    return CameraResponse(ok=ok, capturing=runtime.capture.capturing, alerts=runtime.status.drain_alerts())


@app.get("/camera/frame")
def camera_frame():
    """Latest preview frame as JPEG; 204 when not streaming."""
    jpeg = runtime.capture.preview_jpeg()
    if jpeg is None:
        return Response(status_code=204)
    return Response(content=jpeg, media_type="image/jpeg", headers={"Cache-Control": "no-store"})


@app.post("/camera/capture", response_model=StatusResponse)
def camera_capture():
    image = runtime.capture.capture()
    return _acquired(image, runtime.capture.last_outcome)


@app.post("/camera/cancel", response_model=CameraResponse)
def camera_cancel():
    runtime.capture.cancel()
    return CameraResponse(ok=True, capturing=runtime.capture.capturing)


@app.post("/reset", response_model=StatusResponse)
def reset():
    # back to the initial page: no image, no result, no live camera
    runtime.capture.cancel()
    runtime.orch.reset()
    return status_response()


@app.get("/health")
def health():
    return {
        "api": True,
        "vision_adapter": type(runtime.vision).__name__,
        "vision_ready": bool(getattr(runtime.vision, "_ready", True)),
        "camera_adapter": type(runtime.camera).__name__,
        "phase": runtime.status.phase,
    }
