"""Error taxonomy for card recognition.

InvalidInput / ConfigurationError are raised before any upstream call.
UpstreamFailure wraps whatever the model provider threw.
ResponseParseFailure never leaves the recognizer: it turns into the
sentinel fallback response.
"""

MSG_NO_IMAGE = "No image data provided"
MSG_MISSING_KEY = "Configuration error: Missing API key"
MSG_PARSE_FAILED = "Failed to parse card data"
MSG_INVALID_BODY = "Invalid request body"


class RecognitionError(Exception):
    status_code = 500


class InvalidInput(RecognitionError):
    status_code = 400


class ConfigurationError(RecognitionError):
    status_code = 500


class UpstreamFailure(RecognitionError):
    status_code = 500


class ResponseParseFailure(ValueError):
    pass
