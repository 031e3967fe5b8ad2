"""Client-credentials token acquisition."""

from typing import Optional

import requests
from pydantic import ValidationError

from core.context import HttpContext
from core.errors import AuthError
from core.logger import EntitlectlLogger
from sdk.exceptions import APIException
from sdk.models import TokenResponse

logger = EntitlectlLogger.get_logger()

DEFAULT_TOKEN_PATH = "/SAAS/API/1.0/oauth2/token"


def acquire_token(
    ctx: HttpContext,
    client_id: Optional[str],
    client_secret: Optional[str],
    token_path: str = DEFAULT_TOKEN_PATH,
) -> str:
    """Run one client-credentials grant and install the token on *ctx*.

    Raises:
        AuthError: On missing credentials, a non-2xx reply, a transport
            failure or a body without ``access_token``.  No retry is made.
    """
    if not client_id or not client_secret:
        raise AuthError("Error getting access token: client ID and secret must be configured")

    logger.info("Requesting access token", extra={"target_url": ctx.target_url, "client_id": client_id})
    try:
        body = ctx.client.request_token(token_path, client_id, client_secret)
        grant = TokenResponse.model_validate(body)
    except APIException as exc:
        logger.error("Token grant rejected", extra={"status_code": exc.status_code})
        raise AuthError(f"Error getting access token: {exc}", detail=exc.status, status_code=exc.status_code) from exc
    except requests.RequestException as exc:
        logger.error("Token grant request error", extra={"error": str(exc)})
        raise AuthError(f"Error getting access token: {exc}", detail=str(exc)) from exc
    except ValidationError as exc:
        logger.error("Token grant returned an unexpected body", extra={"error": str(exc)})
        raise AuthError("Error getting access token: invalid response", detail="invalid response") from exc

    ctx.token = grant.access_token
    logger.info("Access token acquired", extra={"token_type": grant.token_type, "expires_in": grant.expires_in})
    return grant.access_token


def ensure_token(
    ctx: HttpContext,
    client_id: Optional[str],
    client_secret: Optional[str],
    token_path: str = DEFAULT_TOKEN_PATH,
) -> str:
    """Return the context's token, acquiring one only if none is present."""
    if ctx.token:
        logger.debug("Reusing access token already on context")
        return ctx.token
    return acquire_token(ctx, client_id, client_secret, token_path)
