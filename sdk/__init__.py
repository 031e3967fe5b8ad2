"""Identity-manager REST SDK: request client and wire models.

The :class:`IdmClient` class sends synchronous ``requests`` calls and funnels
every response through :func:`sdk.responses.parse_response`.

Usage::

    from sdk import IdmClient, APIException
    from sdk.models import ScimListResponse, EntitlementListing
"""

from sdk.client import IdmClient
from sdk.exceptions import APIException
from sdk.responses import backend_message, parse_response

__all__ = [
    "IdmClient",
    "APIException",
    "backend_message",
    "parse_response",
]
