"""Tests for OpenAIVision: request shape and upstream error translation."""

import json

import httpx
import pytest

from cardscan.adapters.vision.openai_vision import OpenAIVision
from cardscan.recognizer.contracts import ModelQuery
from cardscan.recognizer.errors import UpstreamFailure
from tests.conftest import PNG_DATA_URL

QUERY = ModelQuery(instruction_text="Identify this card", image_data=PNG_DATA_URL)


def _vision(status, handler, **kwargs) -> OpenAIVision:
    return OpenAIVision(status, api_key="sk-test", transport=httpx.MockTransport(handler), **kwargs)


def _completion(content) -> dict:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


def test_request_is_single_user_turn_with_text_and_image(status):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion("hello"))

    vision = _vision(status, handler, base_url="https://llm.example/v1/")
    assert vision.complete(QUERY) == "hello"

    assert seen["url"] == "https://llm.example/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    body = seen["body"]
    assert body["model"] == "gpt-4o"
    assert body["max_tokens"] == 1024
    assert "stream" not in body
    assert body["messages"] == [{
        "role": "user",
        "content": [
            {"type": "text", "text": "Identify this card"},
            {"type": "image_url", "image_url": {"url": PNG_DATA_URL}},
        ],
    }]


def test_null_content_becomes_empty_string(status):
    vision = _vision(status, lambda request: httpx.Response(200, json=_completion(None)))
    assert vision.complete(QUERY) == ""


def test_list_content_raises_upstream_failure(status):
    """A list of content parts is not text we can parse."""
    content = [{"type": "text", "text": '{"matchingCards": []}'}]
    vision = _vision(status, lambda request: httpx.Response(200, json=_completion(content)))
    with pytest.raises(UpstreamFailure, match="content is list"):
        vision.complete(QUERY)


def test_non_2xx_raises_upstream_failure_with_service_message(status):
    def handler(request):
        return httpx.Response(401, json={"error": {"message": "Incorrect API key provided"}})

    with pytest.raises(UpstreamFailure, match="401 Incorrect API key provided"):
        _vision(status, handler).complete(QUERY)
    assert any("HTTP 401" in line for line in status.logs)


def test_transport_error_raises_upstream_failure(status):
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(UpstreamFailure, match="timed out"):
        _vision(status, handler).complete(QUERY)


@pytest.mark.parametrize("response", [
    httpx.Response(200, text="<html>gateway</html>"),
    httpx.Response(200, json={"choices": []}),
    httpx.Response(200, json={"object": "chat.completion"}),
])
def test_malformed_transport_response_raises_upstream_failure(status, response):
    with pytest.raises(UpstreamFailure, match="Malformed response"):
        _vision(status, lambda request: response).complete(QUERY)


def test_is_configured_tracks_api_key(status):
    assert OpenAIVision(status, api_key="sk-test").is_configured()
    assert not OpenAIVision(status, api_key=None).is_configured()
    assert not OpenAIVision(status, api_key="").is_configured()
    assert "openai_vision: OPENAI_API_KEY not set" in status.logs
