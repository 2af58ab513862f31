"""
KIMI (Moonshot AI) species identifier.
Uses KIMI's OpenAI-compatible API with multimodal support; the data URI is
passed through unchanged as the image_url.
Requires KIMI_API_KEY in natureid/.env. KIMI_API_URL points it at any other
OpenAI-compatible endpoint.
"""
import os
import httpx
from natureid.adapters.vision.base import IdentificationAdapter, PROMPT, parse_result
from natureid.orchestrator.contracts import IdentificationRequest, IdentificationResult
from natureid.orchestrator.errors import IdentificationError

KIMI_API_URL = os.getenv("KIMI_API_URL", "https://api.moonshot.cn/v1/chat/completions")
KIMI_MODEL   = os.getenv("KIMI_MODEL", "moonshot-v1-8k-vision-preview")


class KimiVision(IdentificationAdapter):
    def __init__(self, status_store, client: httpx.Client | None = None):
        self.status = status_store
        self._api_key = os.getenv("KIMI_API_KEY")
        self._ready   = bool(self._api_key)
        self._client  = client
        if self._ready:
            if self._client is None:
                self._client = httpx.Client(timeout=float(os.getenv("VISION_TIMEOUT_S", "30")))
            self.status.log(f"kimi_vision: ready (model={KIMI_MODEL})")
        else:
            self.status.log("kimi_vision: KIMI_API_KEY not set")

    def close(self):
        if self._client is not None:
            self._client.close()

    def identify(self, request: IdentificationRequest) -> IdentificationResult:
        if not self._ready or self._client is None:
            raise IdentificationError("kimi_vision not configured")

        payload = {
            "model": KIMI_MODEL,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image_url",
                            "image_url": {"url": request.photo_data_uri, "detail": "auto"},
                        },
                        {"type": "text", "text": PROMPT},
                    ],
                }
            ],
            "max_tokens": 1024,
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            resp = self._client.post(KIMI_API_URL, json=payload, headers=headers)
            if not resp.is_success:
                self.status.log(f"kimi_vision: HTTP {resp.status_code} — {resp.text[:300]}")
                resp.raise_for_status()
            raw = resp.json()["choices"][0]["message"]["content"].strip()
            self.status.log(f"kimi_vision: raw={raw[:200]!r}")
            return parse_result(raw)
        except Exception as e:
            self.status.log(f"kimi_vision: API error: {type(e).__name__}: {e}")
            raise
