"""Shared fixtures: a fresh StatusStore, scripted vision adapters, deterministic ids."""

import itertools

import pytest

from cardscan.adapters.vision.mock_vision import MockVision
from cardscan.recognizer.card_recognizer import CardRecognizer
from cardscan.services.status_store import StatusStore

PNG_DATA_URL = "data:image/png;base64,AAAA"


@pytest.fixture
def status() -> StatusStore:
    return StatusStore()


@pytest.fixture
def counting_ids():
    """Id factory yielding "id-1", "id-2", ... so tests can assert exact ids."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def make_recognizer(status, counting_ids):
    """Build (recognizer, vision) around a MockVision that returns `reply`."""

    def _make(reply: str):
        vision = MockVision(status, reply=reply)
        return CardRecognizer(vision, status, id_factory=counting_ids), vision

    return _make
