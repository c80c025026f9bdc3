"""
Fake OpenAI chat-completions server for running cardscan without an API key.

Simulates POST /v1/chat/completions on port 9100. The reply depends on the
instruction text so every response branch can be exercised:
  - contains "prose"  -> plain prose, no JSON (parse fallback)
  - contains "fail"   -> HTTP 500 (upstream failure)
  - otherwise         -> JSON wrapped in a sentence

Usage:
    python -m cardscan.scripts.fake_openai_server                      (terminal 1)
    OPENAI_API_KEY=fake OPENAI_BASE_URL=http://localhost:9100/v1 \\
        uvicorn cardscan.services.api:app --port 8000                  (terminal 2)
"""

import json
import time
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

app = FastAPI(title="fake-openai-server")

CARDS = {
    "matchingCards": [
        {"name": "Charizard GX Rainbow Rare", "confidence": 0.92},
        {"name": "Charizard GX", "confidence": 0.64},
        {"name": "Charizard VMAX", "confidence": 0.31},
        {"name": "Charmander", "confidence": 0.08},
    ]
}


def _completion(model: str, content: str) -> dict:
    return {
        "id": f"chatcmpl-fake-{int(time.time() * 1000)}",
        "object": "chat.completion",
        "created": int(time.time()),
        "model": model,
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    }


@app.post("/v1/chat/completions")
async def chat_completions(request: Request):
    body = await request.json()
    content = body["messages"][0]["content"]
    text = next((p["text"] for p in content if p.get("type") == "text"), "")
    has_image = any(p.get("type") == "image_url" for p in content)
    print(f"[openai] model={body.get('model')} max_tokens={body.get('max_tokens')} image={has_image}")

    if "fail" in text.lower():
        return JSONResponse(status_code=500, content={"error": {"message": "fake upstream failure"}})
    if "prose" in text.lower():
        return _completion(body.get("model", ""), "I think this is a Charizard card.")
    return _completion(body.get("model", ""), f"Here is what I found:\n```json\n{json.dumps(CARDS)}\n```")


if __name__ == "__main__":
    print("Fake OpenAI server starting on http://localhost:9100")
    uvicorn.run(app, host="0.0.0.0", port=9100)
