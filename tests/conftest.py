import os

# keep module-level wiring in natureid.services.api away from real keys and devices
os.environ["VISION_ADAPTER"] = "mock"
os.environ["CAMERA_ADAPTER"] = "mock"

import pytest
from fastapi.testclient import TestClient

from natureid.adapters.camera.mock_camera import MockCamera
from natureid.adapters.vision.base import IdentificationAdapter
from natureid.orchestrator.contracts import EncodedImage, IdentificationResult
from natureid.services import api
from natureid.services.status_store import StatusStore


def make_result(**overrides) -> IdentificationResult:
    fields = dict(
        species_name="Red Fox",
        scientific_name="Vulpes vulpes",
        species_classification="Mammal",
        habitat="Forests and grasslands",
        diet="Omnivore",
        conservation_status="Least Concern",
        interesting_facts="Uses the magnetic field to hunt.",
        confidence=91.0,
        venomous=None,
    )
    fields.update(overrides)
    return IdentificationResult(**fields)


class FakeVision(IdentificationAdapter):
    """Returns `result`, or raises `error` when set. Records every request."""

    def __init__(self, result: IdentificationResult | None = None, error: Exception | None = None):
        self.result = result or make_result()
        self.error = error
        self.requests = []
        self.on_call = None

    def identify(self, request):
        self.requests.append(request)
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        return self.result


JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def vision():
    return FakeVision()


@pytest.fixture
def camera(status):
    return MockCamera(status, video_size=(64, 48))


@pytest.fixture
def jpeg_image():
    return EncodedImage.from_bytes(JPEG_BYTES, "image/jpeg")


@pytest.fixture
def rt(status, vision, camera):
    return api.init_runtime(status=status, vision=vision, camera=camera)


@pytest.fixture
def client(rt):
    return TestClient(api.app)
