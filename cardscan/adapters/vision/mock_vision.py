import json
from cardscan.adapters.vision.base import VisionAdapter

DEFAULT_REPLY = json.dumps({
    "matchingCards": [
        {"name": "Charizard GX Rainbow Rare", "confidence": 0.92},
        {"name": "Charizard GX", "confidence": 0.71},
        {"name": "Charizard VMAX", "confidence": 0.33},
        {"name": "Charmander", "confidence": 0.12},
    ]
})

class MockVision(VisionAdapter):
    def __init__(self, status_store, reply: str = DEFAULT_REPLY):
        self.status = status_store
        self.reply = reply
        self.queries = []

    def complete(self, query) -> str:
        # Mock: ignore the image, return the canned reply
        self.queries.append(query)
        self.status.log(f"mock_vision: replying with {len(self.reply)} chars")
        return self.reply
