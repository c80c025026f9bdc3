from dataclasses import dataclass, field
from typing import Any, Optional

@dataclass(frozen=True)
class RecognitionRequest:
    image_data: Optional[str]          # data URL, e.g. "data:image/png;base64,..."
    game_prompt: Optional[str] = None

@dataclass(frozen=True)
class ModelQuery:
    instruction_text: str
    image_data: str

@dataclass
class CandidateCard:
    id: str
    name: str
    confidence: float
    image: str
    # Any other keys the model put on the card (set, rarity, ...)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {**self.extra, "id": self.id, "name": self.name,
                "confidence": self.confidence, "image": self.image}

@dataclass
class RecognitionResponse:
    matching_cards: list[CandidateCard]
    raw_response: str
    error: Optional[str] = None
