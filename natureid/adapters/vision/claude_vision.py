"""
Claude species identifier (zero-shot).

Sends the photo to Claude via the Anthropic Messages API and asks for the
species record as JSON.

Requires ANTHROPIC_API_KEY in environment (natureid/.env or system env).
CLAUDE_MODEL overrides the model, VISION_TIMEOUT_S the request timeout.
"""
import os
import anthropic
from natureid.adapters.vision.base import IdentificationAdapter, PROMPT, parse_result
from natureid.orchestrator.contracts import IdentificationRequest, IdentificationResult
from natureid.orchestrator.errors import IdentificationError

CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-haiku-4-5-20251001")


class ClaudeVision(IdentificationAdapter):
    def __init__(self, status_store, client=None):
        self.status = status_store
        self._client = client
        self._ready = client is not None
        if client is None:
            self._init_client()

    def _init_client(self):
        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            self.status.log("claude_vision: ANTHROPIC_API_KEY not set")
            return
        timeout = float(os.getenv("VISION_TIMEOUT_S", "30"))
        self._client = anthropic.Anthropic(api_key=api_key, timeout=timeout, max_retries=0)
        self._ready = True
        self.status.log(f"claude_vision: ready ({CLAUDE_MODEL})")

    def identify(self, request: IdentificationRequest) -> IdentificationResult:
        if not self._ready or self._client is None:
            raise IdentificationError("claude_vision not configured")

        image = request.image
        try:
            message = self._client.messages.create(
                model=CLAUDE_MODEL,
                max_tokens=1024,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": image.mime_type,
                                    "data": image.base64_data,
                                },
                            },
                            {"type": "text", "text": PROMPT},
                        ],
                    }
                ],
            )
            raw = "".join(block.text for block in message.content if block.type == "text").strip()
            self.status.log(f"claude_vision: raw response = {raw[:200]!r}")
            return parse_result(raw)
        except Exception as e:
            self.status.log(f"claude_vision: API error: {type(e).__name__}: {e}")
            raise
