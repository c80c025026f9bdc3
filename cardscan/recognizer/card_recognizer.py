from cardscan.recognizer.contracts import RecognitionRequest, RecognitionResponse
from cardscan.recognizer import errors
from cardscan.recognizer.parsing import (
    PLACEHOLDER_IMAGE, IdFactory, parse_model_reply, random_card_id, sentinel_cards,
)
from cardscan.recognizer.prompts import build_query


class CardRecognizer:
    def __init__(self, vision, status_store, id_factory: IdFactory = random_card_id,
                 placeholder_image: str = PLACEHOLDER_IMAGE):
        self.vision = vision
        self.status = status_store
        self.id_factory = id_factory
        self.placeholder_image = placeholder_image

    def recognize(self, req: RecognitionRequest) -> RecognitionResponse:
        """
        validate -> credential check -> build prompt -> call model -> parse.
        Raises InvalidInput / ConfigurationError before touching the model,
        UpstreamFailure if the model call fails. A reply that can't be parsed
        is not an error: it comes back as the single "Unknown Card" entry.
        """
        if not req.image_data:
            self.status.log("recognizer: rejected, no image data")
            raise errors.InvalidInput(errors.MSG_NO_IMAGE)

        configured = self.vision.is_configured()
        self.status.log(f"recognizer: {type(self.vision).__name__} credential configured={configured}")
        if not configured:
            raise errors.ConfigurationError(errors.MSG_MISSING_KEY)

        query = build_query(req)
        self.status.log(f"recognizer: start custom_prompt={bool(req.game_prompt)}")
        raw = self.vision.complete(query) or ""

        try:
            cards = parse_model_reply(raw, id_factory=self.id_factory,
                                      placeholder_image=self.placeholder_image)
        except errors.ResponseParseFailure as e:
            self.status.log(f"recognizer: error parsing AI response: {e} raw='{raw[:300]}'")
            return RecognitionResponse(
                matching_cards=sentinel_cards(self.placeholder_image),
                raw_response=raw,
                error=errors.MSG_PARSE_FAILED,
            )

        self.status.log(f"recognizer: {len(cards)} candidate(s)"
                        + (f", top={cards[0].name} ({cards[0].confidence:.2f})" if cards else ""))
        return RecognitionResponse(matching_cards=cards, raw_response=raw)
