"""Domain error kinds raised by the resolution and entitlement engine."""

from typing import Optional


class EntitlectlError(Exception):
    """Base class for engine failures.

    Attributes:
        detail: Short description of the cause, e.g. ``"404 Not Found"``.
        status_code: HTTP status of the failed call, when there was one.
    """

    def __init__(self, message: str, detail: str = "", status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.detail = detail or message
        self.status_code = status_code


class AuthError(EntitlectlError):
    """The client-credentials grant failed; fatal for the invocation."""


class ResolutionError(EntitlectlError):
    """A SCIM lookup failed or matched nothing."""


class EntitlementFetchError(EntitlectlError):
    """Reading entitlement definitions failed."""


class EntitlementCreateError(EntitlectlError):
    """Creating an entitlement definition was rejected."""
