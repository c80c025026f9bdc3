"""
OpenAI vision card recognizer.
Talks to the Chat Completions API (or any OpenAI-compatible server) over httpx.
The image goes through as the caller's data URL, untouched.

Requires OPENAI_API_KEY (passed in via Settings, never read here).
"""
import httpx
from cardscan.adapters.vision.base import VisionAdapter
from cardscan.recognizer.errors import UpstreamFailure

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL    = "gpt-4o"


class OpenAIVision(VisionAdapter):
    def __init__(self, status_store, api_key: str | None, base_url: str = DEFAULT_BASE_URL,
                 model: str = DEFAULT_MODEL, max_tokens: int = 1024, timeout: float = 60.0,
                 transport: httpx.BaseTransport | None = None):
        self.status     = status_store
        self._api_key   = api_key
        self.base_url   = base_url.rstrip("/")
        self.model      = model
        self.max_tokens = max_tokens
        self.timeout    = timeout
        self._transport = transport
        if self._api_key:
            self.status.log(f"openai_vision: ready (model={self.model})")
        else:
            self.status.log("openai_vision: OPENAI_API_KEY not set")

    def is_configured(self) -> bool:
        return bool(self._api_key)

    def build_payload(self, query) -> dict:
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": query.instruction_text},
                        {"type": "image_url", "image_url": {"url": query.image_data}},
                    ],
                }
            ],
            "max_tokens": self.max_tokens,
        }

    def complete(self, query) -> str:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        self.status.log(f"openai_vision: POST /chat/completions model={self.model}")
        try:
            with httpx.Client(transport=self._transport, timeout=self.timeout) as client:
                resp = client.post(url, json=self.build_payload(query), headers=headers)
        except httpx.HTTPError as e:
            self.status.log(f"openai_vision: transport error: {type(e).__name__}: {e}")
            raise UpstreamFailure(str(e) or type(e).__name__) from e

        if not resp.is_success:
            self.status.log(f"openai_vision: HTTP {resp.status_code}: {resp.text[:300]}")
            raise UpstreamFailure(f"{resp.status_code} {self._error_message(resp)}")

        try:
            content = resp.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            self.status.log(f"openai_vision: malformed response: {resp.text[:300]}")
            raise UpstreamFailure(f"Malformed response from model service: {e!r}") from e

        # Some compatible servers send a list of content parts instead of a string
        if content is not None and not isinstance(content, str):
            self.status.log(f"openai_vision: non-text content: {resp.text[:300]}")
            raise UpstreamFailure(f"Malformed response from model service: content is {type(content).__name__}")

        self.status.log(f"openai_vision: got {len(content or '')} chars")
        return content or ""

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        # OpenAI error bodies look like {"error": {"message": "..."}}
        try:
            return resp.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            return resp.text[:300]
