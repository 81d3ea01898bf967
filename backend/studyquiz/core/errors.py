# backend/studyquiz/core/errors.py
"""
Error taxonomy for quiz generation.

Every error carries the HTTP status it maps to and a message that is safe to
hand back to the browser. Diagnostic detail (raw completions, provider error
bodies) stays in the exception message and the server log.
"""

GENERIC_MESSAGE = "Unexpected error occurred. Check server logs."


class QuizGenerationError(Exception):
    status_code: int = 500
    public_message: str = GENERIC_MESSAGE

    def __init__(self, message: str = "", *, public_message: str | None = None):
        super().__init__(message or self.public_message)
        if public_message is not None:
            self.public_message = public_message


class ConfigurationError(QuizGenerationError):
    """Raised when the OpenAI credential is not configured."""

    public_message = "Missing OpenAI API key"


class UpstreamError(QuizGenerationError):
    """The completion call itself failed (auth, rate limit, network)."""

    def __init__(self, message: str = "", *, unauthorized: bool = False):
        super().__init__(message)
        self.unauthorized = unauthorized
        if unauthorized:
            self.status_code = 401
            self.public_message = (
                "Invalid OpenAI API Key. Check and replace it in your .env file."
            )


class EmptyResponseError(QuizGenerationError):
    pass


class MalformedOutputError(QuizGenerationError):
    public_message = "Failed to parse quiz. LLM response was not valid JSON."

    def __init__(self, message: str = "", *, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class SchemaMismatchError(MalformedOutputError):
    public_message = "Failed to parse quiz. LLM response did not match the quiz format."
