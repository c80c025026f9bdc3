"""
Claude vision card recognizer over the Anthropic SDK.

The SDK wants media type + raw base64 rather than a data URL, so the
caller's data URL is split here. A bare base64 string is sent as JPEG.
"""
import re
import anthropic
from cardscan.adapters.vision.base import VisionAdapter
from cardscan.recognizer.errors import UpstreamFailure

DEFAULT_MODEL = "claude-sonnet-4-5"

_DATA_URL_RE = re.compile(r"^data:(?P<media_type>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)


def split_data_url(image_data: str) -> tuple[str, str]:
    m = _DATA_URL_RE.match(image_data.strip())
    if m:
        return m.group("media_type"), m.group("data")
    return "image/jpeg", image_data.strip()


class ClaudeVision(VisionAdapter):
    def __init__(self, status_store, api_key: str | None, model: str = DEFAULT_MODEL,
                 max_tokens: int = 1024, timeout: float = 60.0, client=None):
        self.status = status_store
        self.model = model
        self.max_tokens = max_tokens
        self._client = client
        if self._client is None and api_key:
            self._client = anthropic.Anthropic(api_key=api_key, timeout=timeout, max_retries=0)
        if self._client is not None:
            self.status.log(f"claude_vision: ready ({self.model})")
        else:
            self.status.log("claude_vision: ANTHROPIC_API_KEY not set")

    def is_configured(self) -> bool:
        return self._client is not None

    def complete(self, query) -> str:
        media_type, b64 = split_data_url(query.image_data)
        self.status.log(f"claude_vision: messages.create model={self.model} media_type={media_type}")
        try:
            message = self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": query.instruction_text},
                            {
                                "type": "image",
                                "source": {"type": "base64", "media_type": media_type, "data": b64},
                            },
                        ],
                    }
                ],
            )
        except anthropic.APIError as e:
            self.status.log(f"claude_vision: API error: {e}")
            raise UpstreamFailure(str(e)) from e

        raw = "".join(block.text for block in message.content if getattr(block, "type", None) == "text")
        self.status.log(f"claude_vision: got {len(raw)} chars")
        return raw
