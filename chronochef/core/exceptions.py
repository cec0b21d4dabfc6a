"""
Error taxonomy shared by services and routers.

Each error carries the HTTP status it maps to and a public message that is
safe to send to clients. Internal detail stays in ``detail`` and the logs.
"""
from typing import List, Optional, Tuple


class ChronoChefError(Exception):
    status_code = 500
    public_message = "An unexpected error occurred"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.public_message
        super().__init__(self.detail)


class ValidationError(ChronoChefError):
    """Malformed or missing input fields."""
    status_code = 400
    public_message = "Invalid request data"

    def __init__(self, errors: List[Tuple[str, str]], detail: Optional[str] = None):
        self.errors = list(errors)
        if detail is None:
            detail = "; ".join(f"{field}: {reason}" for field, reason in self.errors)
        super().__init__(detail)

    @property
    def fields(self) -> List[str]:
        return [field for field, _ in self.errors]

    def to_list(self) -> List[dict]:
        return [{"field": field, "reason": reason} for field, reason in self.errors]


class AuthenticationRequired(ChronoChefError):
    status_code = 401
    public_message = "Authentication required"


class InvalidCredentials(AuthenticationRequired):
    public_message = "Invalid username or password"


class DuplicateKeyError(ChronoChefError):
    """A unique column (email, username) already holds the value."""
    status_code = 400
    public_message = "An account with these details already exists"

    def __init__(self, field: str, detail: Optional[str] = None):
        self.field = field
        super().__init__(detail or f"Duplicate value for {field}")


class ServiceUnavailable(ChronoChefError):
    """Generation backend is missing configuration or credentials."""
    status_code = 503
    public_message = "Recipe generation service is temporarily unavailable"


class UpstreamFormatError(ChronoChefError):
    """Generation backend answered with empty, non-JSON or non-conforming data."""
    status_code = 502
    public_message = "Recipe generation service returned an invalid response"


class UpstreamError(ChronoChefError):
    """Generic failure talking to the generation backend."""
    status_code = 502
    public_message = "Failed to generate recipes"
