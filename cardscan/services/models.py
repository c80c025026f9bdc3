from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class RecognizeCardRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Optional here so a missing image is a 400 "No image data provided", not a 422
    image_data: Optional[str] = Field(default=None, alias="imageData")
    game_prompt: Optional[str] = Field(default=None, alias="gamePrompt")

class CardOut(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    confidence: float
    image: str

class RecognizeCardResponse(BaseModel):
    matchingCards: list[CardOut]
    rawResponse: str
    error: Optional[str] = None   # only set on the "Unknown Card" fallback

class ErrorResponse(BaseModel):
    error: str

class HealthResponse(BaseModel):
    api: bool
    vision_adapter: str
    vision_configured: bool
    all_ok: bool

class StatusResponse(BaseModel):
    logs: list[str]
