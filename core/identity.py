import requests
from pydantic import ValidationError

from core.context import HttpContext
from core.errors import ResolutionError
from core.logger import EntitlectlLogger
from core.principal import PrincipalKind
from sdk.exceptions import APIException
from sdk.models import ScimListResponse

logger = EntitlectlLogger.get_logger()

# Large enough that a filtered lookup never needs a second page.
SCIM_MAX_COUNT = 10000


def scim_filter(attribute: str, name: str) -> str:
    """Build an exact-match SCIM filter expression.

    Backslashes and double quotes in *name* are escaped so the value stays a
    single string literal inside the filter.
    """
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'{attribute} eq "{escaped}"'


def resolve_id(ctx: HttpContext, kind: PrincipalKind, name: str, attribute: str | None = None) -> str:
    """Resolve a user or group name to its backend-assigned ID.

    Queries ``scim/Users`` or ``scim/Groups`` filtered on *attribute* (the
    kind's default lookup attribute when omitted) and returns the ``id`` of
    the first match.  Apps are referenced by name and never resolved.

    Raises:
        ValueError: If *kind* is not resolvable.
        ResolutionError: On a non-2xx reply, no match or a malformed body.
    """
    if not kind.resolvable:
        raise ValueError(f"{kind} names are not resolved through SCIM")

    collection = kind.info.collection
    attribute = attribute or kind.info.filter_attribute
    params = {"count": SCIM_MAX_COUNT, "filter": scim_filter(attribute, name)}

    def _fail(detail: str, status_code: int | None = None) -> ResolutionError:
        logger.warning(
            "SCIM lookup failed",
            extra={"collection": collection, "principal": name, "detail": detail, "status_code": status_code},
        )
        return ResolutionError(
            f"Error getting SCIM {collection} ID of {name}: {detail}",
            detail=detail,
            status_code=status_code,
        )

    try:
        body = ctx.request("GET", f"scim/{collection}", params=params)
        listing = ScimListResponse.model_validate(body)
    except APIException as exc:
        raise _fail(exc.status, exc.status_code) from exc
    except requests.RequestException as exc:
        raise _fail(str(exc)) from exc
    except ValidationError as exc:
        raise _fail("invalid response") from exc

    if not listing.resources:
        raise _fail("not found")

    resolved = listing.resources[0].id
    logger.info(
        "Resolved SCIM identity",
        extra={"kind": str(kind), "principal": name, "attribute": attribute, "resolved_id": resolved},
    )
    return resolved
