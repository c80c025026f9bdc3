from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cardscan.recognizer.card_recognizer import CardRecognizer
from cardscan.recognizer.contracts import RecognitionRequest
from cardscan.recognizer.errors import MSG_INVALID_BODY, RecognitionError
from cardscan.services.config import build_vision, load_settings
from cardscan.services.models import (
    RecognizeCardRequest, RecognizeCardResponse, ErrorResponse,
    HealthResponse, StatusResponse,
)
from cardscan.services.status_store import StatusStore


def create_app(recognizer: CardRecognizer, status: StatusStore) -> FastAPI:
    app = FastAPI(title="cardscan")

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        # Keep the {"error": ...} body shape instead of FastAPI's 422 {"detail": [...]}
        errs = exc.errors()
        detail = errs[0].get("msg", "") if errs else ""
        status.log(f"{request.url.path}: invalid body: {detail}")
        return JSONResponse(status_code=400, content={"error": f"{MSG_INVALID_BODY}: {detail}" if detail else MSG_INVALID_BODY})

    @app.post(
        "/recognize-card",
        response_model=RecognizeCardResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    def recognize_card(req: RecognizeCardRequest):
        """Identify the card in imageData; gamePrompt optionally replaces the default instruction.

        A reply the model got wrong still returns 200 with a single "Unknown Card"
        entry and an `error` field. Only bad input, missing config and upstream
        failures return error statuses.
        """
        try:
            result = recognizer.recognize(RecognitionRequest(image_data=req.image_data, game_prompt=req.game_prompt))
        except RecognitionError as e:
            status.log(f"RECOGNIZE_CARD: {type(e).__name__}: {e}")
            return JSONResponse(status_code=e.status_code, content={"error": str(e)})
        except Exception as e:
            status.log(f"RECOGNIZE_CARD: error recognizing card: {type(e).__name__}: {e}")
            return JSONResponse(status_code=500, content={"error": str(e)})

        # Built by hand: `error` is left out on success, but null fields the model
        # put on a card ("set": null) are passed through as-is
        body = {
            "matchingCards": [c.to_dict() for c in result.matching_cards],
            "rawResponse": result.raw_response,
        }
        if result.error is not None:
            body["error"] = result.error
        return JSONResponse(content=body)

    @app.get("/health", response_model=HealthResponse)
    def health():
        vision = recognizer.vision
        configured = vision.is_configured()
        return HealthResponse(
            api=True,
            vision_adapter=type(vision).__name__,
            vision_configured=configured,
            all_ok=configured,
        )

    @app.get("/status", response_model=StatusResponse)
    def get_status():
        return StatusResponse(logs=status.logs)

    return app


settings = load_settings()
status = StatusStore()
vision = build_vision(settings, status)
status.log(f"vision adapter: {type(vision).__name__}")

app = create_app(CardRecognizer(vision, status, placeholder_image=settings.placeholder_image), status)
