from __future__ import annotations


class RecipeRelayError(Exception):
    """Base error for failures surfaced to the client as `{"error", "details"?}`."""

    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: str | None = None,
        status_code: int | None = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class InvalidInputError(RecipeRelayError):
    """Raised when the request body is missing a usable prompt."""

    status_code = 400
    default_message = "Prompt is required"


class RateLimitedError(RecipeRelayError):
    """Raised when the local limiter or the upstream provider rejects the request rate."""

    status_code = 429
    default_message = "Rate limit exceeded. Please wait a moment and try again."

    def __init__(self, message: str | None = None, *, retry_after: int | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class UnauthorizedError(RecipeRelayError):
    """Raised when the upstream credential is missing or rejected."""

    status_code = 401
    default_message = "Invalid API key. Please check the OPENAI_API_KEY setting."


class UpstreamTimeoutError(RecipeRelayError):
    status_code = 504
    default_message = (
        "Request timeout. The recipe service took too long to respond. Please try again."
    )


class UpstreamError(RecipeRelayError):
    """Raised for any other non-success upstream status."""

    default_message = "Failed to generate recipe"


class InternalError(RecipeRelayError):
    """Raised for unexpected failures (network errors, malformed upstream payloads)."""
