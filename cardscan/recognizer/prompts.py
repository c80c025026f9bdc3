from cardscan.recognizer.contracts import ModelQuery, RecognitionRequest

# Appended to every instruction so the output contract is the same for any prompt
JSON_SHAPE_CLAUSE = (
    "Return a JSON response with the following format: "
    '{"matchingCards": [{"name": "card name", "confidence": 0.XX}, ...]} '
    "- Include the top 4 most likely matches, ordered from most to least likely, "
    "with confidence scores between 0 and 1."
)

DEFAULT_INSTRUCTION = (
    "Analyze this image of a gaming card (like Magic: The Gathering, Pokémon, "
    "Yu-Gi-Oh!, playing cards etc.). Identify the specific card including its "
    "exact name, set, and rarity if visible. "
    "Be specific with card names (e.g., 'Charizard GX Rainbow Rare' rather than "
    "just 'Pokémon Card')."
)


def build_instruction(game_prompt: str | None = None) -> str:
    if game_prompt:
        return f"{game_prompt}\n\nAnalyze this image. {JSON_SHAPE_CLAUSE}"
    return f"{DEFAULT_INSTRUCTION}\n\n{JSON_SHAPE_CLAUSE}"


def build_query(req: RecognitionRequest) -> ModelQuery:
    return ModelQuery(instruction_text=build_instruction(req.game_prompt), image_data=req.image_data or "")
