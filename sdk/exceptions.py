"""Exception hierarchy for the identity-manager REST SDK."""

from http import HTTPStatus
from typing import Any, Dict, Optional


def status_phrase(status_code: int, fallback: str = "") -> str:
    """Return the standard reason phrase for *status_code*.

    Unknown codes use *fallback* (usually the server's reason text) and
    finally ``"Unknown Status"``.
    """
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return fallback or "Unknown Status"


class APIException(Exception):
    """Base exception for non-2xx responses from the identity manager.

    ``str(exc)`` renders as ``"<code> <phrase>"``, followed by the
    backend-supplied message on its own line when there is one, e.g.
    ``"404 Not Found\\ntest: foo does not exist"``.

    Attributes:
        status_code: HTTP status code returned by the API.
        phrase: Standard reason phrase for the status code.
        message: Human message extracted from the error body, or ``""``.
        response_body: Parsed JSON error body as a dict, when available.
    """

    def __init__(
        self,
        status_code: int,
        message: str = "",
        response_body: Optional[Dict[str, Any]] = None,
        phrase: Optional[str] = None,
    ) -> None:
        """Initialise with the HTTP status code and optional backend message."""
        self.status_code = status_code
        self.phrase = phrase or status_phrase(status_code)
        self.message = message
        self.response_body = response_body or {}
        super().__init__(self.status)

    @property
    def status(self) -> str:
        """Status line without the backend message, e.g. ``"404 Not Found"``."""
        return f"{self.status_code} {self.phrase}"

    def __str__(self) -> str:
        if self.message:
            return f"{self.status}\n{self.message}"
        return self.status
