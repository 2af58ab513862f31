import base64

from fastapi.testclient import TestClient

from conftest import JPEG_BYTES, make_result
from natureid.orchestrator import errors
from natureid.orchestrator.errors import (
    CAMERA_UNAVAILABLE_MESSAGE, CAPTURE_FAILED_MESSAGE, IDENTIFY_ERROR_MESSAGE, IDENTIFY_ERROR_TITLE,
    INVALID_FILE_MESSAGE,
)


def upload(client, mime="image/jpeg", content=JPEG_BYTES):
    return client.post("/upload", files={"file": ("photo", content, mime)}).json()


def test_status_starts_idle(client):
    data = client.get("/status").json()
    assert data["phase"] == "idle"
    assert data["loading"] is False
    assert data["result"] is None
    assert data["image_data_uri"] is None


def test_upload_success_returns_result_as_sent(client, vision):
    vision.result = make_result(confidence=69.9, venomous=True)
    data = upload(client)
    assert data["accepted"] is True
    assert data["phase"] == "success"
    assert data["result"]["speciesName"] == "Red Fox"
    assert data["result"]["confidence"] == 69.9
    assert data["result"]["venomous"] is True
    assert data["view"] == {"confidence_label": "69.9%", "low_confidence": True, "venom_badge": "Venomous"}
    assert data["image_data_uri"] == "data:image/jpeg;base64," + base64.b64encode(JPEG_BYTES).decode()
    assert len(vision.requests) == 1


def test_upload_omitted_venomous_has_no_badge(client, vision):
    vision.result = make_result(confidence=70.0)
    data = upload(client)
    assert data["result"]["venomous"] is None
    assert data["view"]["venom_badge"] is None
    assert data["view"]["low_confidence"] is False


def test_upload_invalid_type(client, vision):
    data = upload(client, mime="text/plain")
    assert data["accepted"] is False
    assert data["phase"] == "idle"
    assert data["alerts"] == [INVALID_FILE_MESSAGE]
    assert vision.requests == []
    # alerts are read-and-clear
    assert client.get("/status").json()["alerts"] == []


def test_upload_failure_is_generic(client, vision):
    vision.error = ConnectionError("upstream 502 secret detail")
    data = upload(client)
    assert data["accepted"] is True
    assert data["phase"] == "error"
    assert data["error_code"] == errors.ERR_IDENTIFY
    assert data["error"] == IDENTIFY_ERROR_MESSAGE
    assert data["notifications"] == [
        {"title": IDENTIFY_ERROR_TITLE, "description": IDENTIFY_ERROR_MESSAGE, "variant": "destructive"}
    ]
    assert "secret detail" not in data["error"]


def test_reset_clears_everything(client):
    upload(client)
    data = client.post("/reset").json()
    assert data["phase"] == "idle"
    assert data["loading"] is False
    assert data["result"] is None
    assert data["error"] is None
    assert data["image_data_uri"] is None


def test_drag_and_drop(client, vision):
    assert client.post("/drag/enter").json() == {"ok": True, "drag_active": True}
    assert client.post("/drag/leave").json() == {"ok": True, "drag_active": False}
    client.post("/drag/enter")
    data = client.post("/drop", files=[
        ("files", ("a.png", b"png", "image/png")),
        ("files", ("b.txt", b"txt", "text/plain")),
    ]).json()
    assert data["accepted"] is True
    assert data["drag_active"] is False
    assert data["image_data_uri"].startswith("data:image/png;base64,")
    assert len(vision.requests) == 1


def test_identify_data_uri(client, vision):
    uri = "data:image/webp;base64," + base64.b64encode(b"webp").decode()
    data = client.post("/identify", json={"photoDataUri": uri}).json()
    assert data["accepted"] is True
    assert data["phase"] == "success"
    assert vision.requests[0].photo_data_uri == uri


def test_identify_rejects_bad_data_uri(client, vision):
    data = client.post("/identify", json={"photoDataUri": "data:image/gif;base64,R0lG"}).json()
    assert data["accepted"] is False
    assert data["alerts"] == [INVALID_FILE_MESSAGE]
    assert vision.requests == []


def test_camera_capture_flow(client, camera, vision):
    started = client.post("/camera/start").json()
    assert started == {"ok": True, "capturing": True, "alerts": []}
    assert client.get("/status").json()["phase"] == "capturing"

    frame = client.get("/camera/frame")
    assert frame.status_code == 200
    assert frame.headers["content-type"] == "image/jpeg"

    data = client.post("/camera/capture").json()
    assert data["accepted"] is True
    assert data["capturing"] is False
    assert data["phase"] == "success"
    assert data["image_data_uri"].startswith("data:image/jpeg;base64,")
    assert camera.opened[0].active_tracks == 0
    assert len(vision.requests) == 1


def test_camera_cancel(client, camera, vision):
    client.post("/camera/start")
    assert client.post("/camera/cancel").json()["capturing"] is False
    assert camera.opened[0].active_tracks == 0
    assert client.get("/camera/frame").status_code == 204
    assert vision.requests == []


def test_camera_denied(client, camera):
    camera.available = False
    data = client.post("/camera/start").json()
    assert data == {"ok": False, "capturing": False, "alerts": [CAMERA_UNAVAILABLE_MESSAGE]}
    assert client.get("/status").json()["phase"] == "idle"


def test_capture_without_stream(client, vision):
    data = client.post("/camera/capture").json()
    assert data["accepted"] is False
    assert vision.requests == []


def test_health(client):
    data = client.get("/health").json()
    assert data["api"] is True
    assert data["vision_adapter"] == "FakeVision"
    assert data["camera_adapter"] == "MockCamera"


def test_web_index_renders_phase(rt):
    from natureid.web.app import app

    web = TestClient(app)
    page = web.get("/")
    assert page.status_code == 200
    assert "NatureID" in page.text
    assert web.get("/static/app.js").status_code == 200

    web.post("/upload", files={"file": ("p.jpg", JPEG_BYTES, "image/jpeg")})
    page = web.get("/")
    assert 'data-phase="success"' in page.text
    assert "Identify Another Species" in page.text


def test_shutdown_releases_camera(client, camera):
    from natureid.services import api

    client.post("/camera/start")
    api.shutdown()
    assert camera.opened[0].active_tracks == 0


def test_upload_while_loading_is_refused(client, rt, vision, jpeg_image):
    rt.status.begin_loading(jpeg_image)
    data = upload(client)
    assert data["accepted"] is False
    assert data["error_code"] == errors.ERR_BUSY
    assert data["phase"] == "loading"
    assert vision.requests == []


def test_capture_without_frame_alerts(client, camera, vision):
    client.post("/camera/start")
    camera.opened[0].read_frame = lambda: None
    data = client.post("/camera/capture").json()
    assert data["accepted"] is False
    assert data["alerts"] == [CAPTURE_FAILED_MESSAGE]
    assert data["phase"] == "idle"
    assert camera.opened[0].active_tracks == 0
    assert vision.requests == []


def test_reset_releases_camera(client, camera):
    client.post("/camera/start")
    data = client.post("/reset").json()
    assert data["capturing"] is False
    assert data["phase"] == "idle"
    assert camera.opened[0].active_tracks == 0
    assert client.get("/camera/frame").status_code == 204


def test_web_index_shows_failure_toast_once(rt, vision):
    from natureid.web.app import app

    vision.error = ConnectionError("upstream down")
    web = TestClient(app)
    web.post("/upload", files={"file": ("p.jpg", JPEG_BYTES, "image/jpeg")})
    page = web.get("/").text
    assert 'class="toast toast-destructive"' in page
    assert IDENTIFY_ERROR_TITLE in page
    assert IDENTIFY_ERROR_TITLE not in web.get("/").text


def test_browser_camera_failure_does_not_start_server_camera(rt):
    from natureid.web.app import app

    web = TestClient(app)
    page = web.get("/").text
    assert f'data-camera-error="{CAMERA_UNAVAILABLE_MESSAGE}"' in page
    assert 'data-action="server-camera-start"' in page
    script = web.get("/static/app.js").text
    start = script.index("catch (err)")
    failure = script[start:script.index("return;", start)]
    assert "window.alert(document.querySelector('main').dataset.cameraError)" in failure
    assert "/camera/start" not in failure
    assert "'server-camera-start': () => fetch('/camera/start'" in script
