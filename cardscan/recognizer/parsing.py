"""
Turn the model's free-form reply into candidate cards.

The model is asked for {"matchingCards": [...]} but often wraps it in prose
or a ```json fence. We take everything from the first "{" to the last "}"
and parse that; if there is no brace pair the whole text is tried.
"""
import json
import math
import random
import re
import string
from typing import Any, Callable

from cardscan.recognizer.contracts import CandidateCard
from cardscan.recognizer.errors import ResponseParseFailure

PLACEHOLDER_IMAGE = "/api/placeholder/60/90"

SENTINEL_NAME = "Unknown Card"
SENTINEL_CONFIDENCE = 0.5

# Used when the model gives a card no usable confidence
MISSING_CONFIDENCE = 0.0

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")
_BASE36 = string.digits + string.ascii_lowercase

IdFactory = Callable[[], str]


def random_card_id(length: int = 7) -> str:
    """Short random base-36 token, e.g. 'k3x9q0a'."""
    return "".join(random.choice(_BASE36) for _ in range(length))


def extract_json_candidate(raw: str) -> str:
    m = _JSON_OBJECT_RE.search(raw)
    return m.group(0) if m else raw


def _coerce_confidence(value: Any) -> float:
    """Number or numeric string, clamped to [0, 1]. Anything else is MISSING_CONFIDENCE."""
    # bool is an int subclass; true is not a confidence
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return MISSING_CONFIDENCE
    try:
        conf = float(value)
    except ValueError:
        return MISSING_CONFIDENCE
    if not math.isfinite(conf):
        return MISSING_CONFIDENCE
    return min(1.0, max(0.0, conf))


def parse_card_entries(raw: str) -> list[dict[str, Any]]:
    """
    Return the card dicts from a raw reply, or raise ResponseParseFailure when
    the reply isn't JSON or has no matchingCards list. Entries that aren't
    objects or have no name are dropped; the rest are kept.
    """
    candidate = extract_json_candidate(raw or "")
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ResponseParseFailure(f"invalid JSON: {e}") from e

    if not isinstance(parsed, dict) or not isinstance(parsed.get("matchingCards"), list):
        raise ResponseParseFailure("Invalid response format")

    entries = []
    for card in parsed["matchingCards"]:
        if not isinstance(card, dict):
            continue
        name = card.get("name")
        if not isinstance(name, str) or not name.strip():
            continue
        entries.append({**card, "confidence": _coerce_confidence(card.get("confidence"))})
    return entries


def parse_model_reply(
    raw: str,
    id_factory: IdFactory = random_card_id,
    placeholder_image: str = PLACEHOLDER_IMAGE,
) -> list[CandidateCard]:
    """Parse a reply into cards with fresh ids. Raises ResponseParseFailure."""
    cards: list[CandidateCard] = []
    seen: set[str] = set()
    for entry in parse_card_entries(raw):
        card_id = id_factory()
        while not card_id or card_id in seen:
            card_id = id_factory()
        seen.add(card_id)
        extra = {k: v for k, v in entry.items() if k not in ("id", "name", "confidence", "image")}
        cards.append(CandidateCard(
            id=card_id,
            name=entry["name"],
            confidence=entry["confidence"],
            image=placeholder_image,
            extra=extra,
        ))
    return cards


def sentinel_cards(placeholder_image: str = PLACEHOLDER_IMAGE) -> list[CandidateCard]:
    return [CandidateCard(id="1", name=SENTINEL_NAME, confidence=SENTINEL_CONFIDENCE, image=placeholder_image)]
