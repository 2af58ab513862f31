import base64
import re
from dataclasses import dataclass, field
from typing import Optional, Literal

from natureid.orchestrator.errors import InvalidImageError

Phase = Literal["idle", "capturing", "loading", "error", "success"]

ALLOWED_MIME_TYPES = ("image/jpeg", "image/png", "image/heic", "image/webp")

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>[A-Za-z0-9+/=\s]*)$")


def parse_data_uri(data_uri: str) -> tuple[str, str]:
    """Split a base64 data URI into (mime_type, payload). Raises InvalidImageError."""
    m = _DATA_URI_RE.match(data_uri or "")
    if not m:
        raise InvalidImageError("not a base64 data URI")
    return m.group("mime").lower(), m.group("data")


@dataclass(frozen=True)
class EncodedImage:
    data_uri: str    # data:<mime>;base64,<payload>
    _mime: str = field(init=False, repr=False, compare=False)
    _payload: str = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # parsed once; data URIs run to megabytes
        mime, payload = parse_data_uri(self.data_uri)
        object.__setattr__(self, "_mime", mime)
        object.__setattr__(self, "_payload", payload)

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "EncodedImage":
        b64 = base64.standard_b64encode(data).decode("ascii")
        return cls(data_uri=f"data:{mime_type};base64,{b64}")

    @classmethod
    def from_data_uri(cls, data_uri: str) -> "EncodedImage":
        return cls(data_uri=data_uri)

    @property
    def mime_type(self) -> str:
        return self._mime

    @property
    def base64_data(self) -> str:
        return self._payload

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.base64_data)

@dataclass(frozen=True)
class IdentificationRequest:
    image: EncodedImage

    @property
    def photo_data_uri(self) -> str:
        return self.image.data_uri

@dataclass
class IdentificationResult:
    species_name: str
    scientific_name: str
    species_classification: str
    habitat: str
    diet: str
    conservation_status: str
    interesting_facts: str
    confidence: float          # 0-100
    venomous: Optional[bool] = None   # None = not reported, never "not venomous"

@dataclass(frozen=True)
class SessionState:
    phase: Phase = "idle"
    image: Optional[EncodedImage] = None
    result: Optional[IdentificationResult] = None
    error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.phase == "loading"

@dataclass
class IdentifyOutcome:
    ok: bool
    duration_ms: int
    error_code: Optional[str] = None
    result: Optional[IdentificationResult] = None
