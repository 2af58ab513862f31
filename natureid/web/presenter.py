"""
Server-side rendering of the session.

present() derives the view model for a result; render_page() turns any
SessionState into the full HTML page. Nothing here holds state. Buttons carry
data-action attributes that static/app.js wires to the API.
"""
from dataclasses import dataclass, field
from html import escape
from typing import Optional

from natureid.orchestrator.contracts import IdentificationResult, SessionState
from natureid.orchestrator.errors import CAMERA_UNAVAILABLE_MESSAGE

LOW_CONFIDENCE_THRESHOLD = 70.0

LOW_CONFIDENCE_TEXT = (
    "The identification confidence is low. For a more accurate result, "
    "please try a clearer, higher-quality image."
)


@dataclass
class ResultView:
    image_data_uri: str
    species_name: str
    scientific_name: str
    confidence: float
    confidence_label: str
    low_confidence: bool
    venom_badge: Optional[str]                 # None when venomous was not reported
    info_cards: list[tuple[str, str]] = field(default_factory=list)
    reset_action: str = "reset"


def venom_badge(venomous: Optional[bool]) -> Optional[str]:
    if venomous is None:
        return None
    return "Venomous" if venomous else "Non-Venomous"


def present(result: IdentificationResult, image_data_uri: str) -> ResultView:
    return ResultView(
        image_data_uri=image_data_uri,
        species_name=result.species_name,
        scientific_name=result.scientific_name,
        confidence=result.confidence,
        confidence_label=f"{result.confidence:.1f}%",
        low_confidence=result.confidence < LOW_CONFIDENCE_THRESHOLD,
        venom_badge=venom_badge(result.venomous),
        info_cards=[
            ("Classification", result.species_classification),
            ("Habitat", result.habitat),
            ("Diet", result.diet),
            ("Conservation Status", result.conservation_status),
            ("Interesting Facts", result.interesting_facts),
        ],
    )


def _info_card(title: str, text: str) -> str:
    return (
        '<div class="card info-card">'
        f"<h3>{escape(title)}</h3><p>{escape(text)}</p>"
        "</div>"
    )


def render_result(view: ResultView) -> str:
    badge = ""
    if view.venom_badge is not None:
        variant = "destructive" if view.venom_badge == "Venomous" else "default"
        badge = f'<span class="badge badge-{variant}">{escape(view.venom_badge)}</span>'

    warning = ""
    if view.low_confidence:
        warning = (
            '<div class="alert alert-destructive" role="alert">'
            f"<strong>Low Confidence</strong><p>{escape(LOW_CONFIDENCE_TEXT)}</p>"
            "</div>"
        )

    cards = "".join(_info_card(t, txt) for t, txt in view.info_cards)
    return (
        '<section id="result">'
        '<div class="result-head">'
        f'<img src="{escape(view.image_data_uri, quote=True)}" alt="Image of {escape(view.species_name, quote=True)}" class="preview">'
        '<div class="card">'
        f"<h1>{escape(view.species_name)}</h1>"
        f"<p><em>{escape(view.scientific_name)}</em></p>"
        '<div class="confidence"><span>Confidence</span>'
        f"<strong>{escape(view.confidence_label)}</strong></div>"
        f'<progress max="100" value="{view.confidence:.1f}"></progress>'
        f"{badge}"
        "</div>"
        f"{warning}"
        "</div>"
        f'<div class="cards">{cards}</div>'
        f'<button data-action="{escape(view.reset_action)}">Identify Another Species</button>'
        "</section>"
    )


def _render_idle(drag_active: bool) -> str:
    cls = "dropzone active" if drag_active else "dropzone"
    return (
        '<header><h1>NatureID</h1><p>Upload an image to identify any species.</p></header>'
        f'<section id="uploader" class="{cls}">'
        '<input type="file" id="file-input" accept="image/jpeg,image/png,image/heic,image/webp" hidden>'
        "<h3>Drag &amp; Drop Image</h3>"
        "<p>or choose one of the options below</p>"
        '<button data-action="upload">Upload from Device</button>'
        '<button data-action="camera-start">Use Camera</button>'
        '<button data-action="server-camera-start">Use Server Camera</button>'
        "</section>"
    )


def _render_capturing() -> str:
    return (
        '<section id="camera">'
        '<img id="camera-preview" src="/camera/frame" alt="Live camera preview">'
        '<button data-action="camera-capture">Capture</button>'
        '<button data-action="camera-cancel" aria-label="Cancel">&times;</button>'
        "</section>"
    )


def _render_loading(image_data_uri: Optional[str]) -> str:
    preview = ""
    if image_data_uri:
        preview = f'<img src="{escape(image_data_uri, quote=True)}" alt="Preview for analysis" class="preview">'
    return (
        '<section id="loading">'
        "<h2>Analyzing your image...</h2>"
        "<p>Our AI is working its magic to identify the species.</p>"
        f"{preview}"
        "</section>"
    )


def _render_error(message: str) -> str:
    return (
        '<section id="error">'
        f'<p class="error">{escape(message)}</p>'
        '<button data-action="reset">Try again</button>'
        "</section>"
    )


def render_body(state: SessionState, drag_active: bool = False) -> str:
    if state.phase == "capturing":
        return _render_capturing()
    if state.phase == "loading":
        return _render_loading(state.image.data_uri if state.image else None)
    if state.phase == "error":
        return _render_error(state.error or "")
    if state.phase == "success" and state.result is not None and state.image is not None:
        return render_result(present(state.result, state.image.data_uri))
    return _render_idle(drag_active)


def render_toasts(notifications) -> str:
    """Non-blocking notifications; anything with title/description/variant."""
    if not notifications:
        return ""
    toasts = "".join(
        f'<div class="toast toast-{escape(n.variant, quote=True)}" role="status">'
        f"<strong>{escape(n.title)}</strong><p>{escape(n.description)}</p>"
        "</div>"
        for n in notifications
    )
    return f'<div id="toasts">{toasts}</div>'


def render_page(state: SessionState, drag_active: bool = False, notifications=()) -> str:
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en"><head><meta charset="UTF-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">'
        "<title>NatureID</title>"
        '<link rel="stylesheet" href="/static/app.css">'
        "</head><body>"
        f'<main data-phase="{state.phase}" data-camera-error="{escape(CAMERA_UNAVAILABLE_MESSAGE, quote=True)}">'
        f"{render_body(state, drag_active)}</main>"
        f"{render_toasts(notifications)}"
        '<script src="/static/app.js"></script>'
        "</body></html>"
    )
