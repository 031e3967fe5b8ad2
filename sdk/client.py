"""IdmClient -- thin synchronous client for the identity-manager REST API.

HTTP calls use the ``requests`` library.  Every response is classified by
:func:`sdk.responses.parse_response`, so callers either get a parsed JSON
body or an :class:`~sdk.exceptions.APIException`.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import urlencode

import requests

from core.logger import EntitlectlLogger
from sdk.responses import parse_response

logger = EntitlectlLogger.get_logger()


class IdmClient:
    """Client-side request layer for the identity manager.

    Paths passed to :meth:`request` are relative to ``target_url + base_path``;
    :meth:`request_token` addresses the token endpoint from the target root.
    """

    _DEFAULT_TIMEOUT: int = 10

    def __init__(self, target_url: str, base_path: str = "/", timeout: int = _DEFAULT_TIMEOUT) -> None:
        """Create a new client bound to *target_url*.

        Args:
            target_url: Scheme and host of the backend (e.g. ``https://idm.example.com``).
            base_path: Versioned API prefix (e.g. ``/SAAS/jersey/manager/api/``).
            timeout: Request timeout in seconds.
        """
        self._target_url = target_url.rstrip("/")
        self._base_path = "/" + base_path.strip("/") + "/" if base_path.strip("/") else "/"
        self._timeout = timeout

    # ------------------------------------------------------------------
    #  Internal helpers
    # ------------------------------------------------------------------

    def url(self, path: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Build the absolute URL for an API *path* with an encoded query."""
        url = f"{self._target_url}{self._base_path}{path.lstrip('/')}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    def _send(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        """Send one request and classify the response.

        Raises:
            APIException: If the response status code is not 2xx.
            requests.RequestException: On transport-level failures.
        """
        logger.debug("Sending request", extra={"method": method, "url": url})
        response = requests.request(method, url, timeout=self._timeout, **kwargs)
        logger.debug(
            "Received response",
            extra={"method": method, "url": url, "status_code": response.status_code},
        )
        return parse_response(response)

    # ------------------------------------------------------------------
    #  Public API
    # ------------------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Call an API endpoint and return the parsed JSON body."""
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        kwargs: Dict[str, Any] = {"headers": headers}
        if payload is not None:
            kwargs["json"] = payload
        return self._send(method.upper(), self.url(path, params), **kwargs)

    def request_token(self, token_path: str, client_id: str, client_secret: str) -> Dict[str, Any]:
        """Perform an OAuth2 client-credentials grant against *token_path*."""
        url = f"{self._target_url}/{token_path.lstrip('/')}"
        auth: Tuple[str, str] = (client_id, client_secret)
        return self._send(
            "POST",
            url,
            headers={"Accept": "application/json"},
            data={"grant_type": "client_credentials"},
            auth=auth,
        )
