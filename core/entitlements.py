"""Entitlement reads and creation for users, groups and apps.

:func:`get_entitlements` renders the definitions of one subject into the
context's output log and raises on failure so the caller can pick an exit
status.  :func:`maybe_entitle` is a best-effort write: it always produces
exactly one output line (success or error) and never raises.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from core.context import HttpContext
from core.errors import EntitlectlError, EntitlementCreateError, EntitlementFetchError, ResolutionError
from core.identity import resolve_id
from core.logger import EntitlectlLogger
from core.principal import PrincipalKind
from sdk.exceptions import APIException
from sdk.models import EntitlementDefinition, EntitlementListing

logger = EntitlectlLogger.get_logger()

DEFINITIONS_PATH = "entitlements/definitions"


@dataclasses.dataclass(frozen=True)
class EntitleOutcome:
    """Result of one :func:`maybe_entitle` call."""
    ok: bool
    kind: PrincipalKind
    principal: str
    target: str
    status_code: Optional[int] = None
    detail: str = ""


def _display(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)) or value is None:
        return str(value)
    return json.dumps(value, separators=(",", ":"), sort_keys=True, default=str)


def render_entry(entry: Any) -> str:
    """Format one listing entry as ``Entitlements: <value>``.

    A mapping carrying an ``Entitlements`` field renders that field; any
    other entry is rendered whole.  Strings and numbers print as-is, lists
    and mappings as compact JSON.
    """
    if isinstance(entry, dict) and "Entitlements" in entry:
        entry = entry["Entitlements"]
    return f"Entitlements: {_display(entry)}"


def get_entitlements(ctx: HttpContext, kind: PrincipalKind, name: str) -> List[Any]:
    """Fetch and render the entitlement definitions of one subject.

    Users and groups are resolved to their ID first; an app name is used as
    the catalog item ID directly.  Each entry becomes one info line, in the
    order the backend returned them.

    Raises:
        ResolutionError: If the user or group lookup fails.
        EntitlementFetchError: If the definitions read fails.  Nothing is
            written to the info log in that case.
    """
    subject_id = resolve_id(ctx, kind, name) if kind.resolvable else name
    path = f"{DEFINITIONS_PATH}/{kind.info.path_segment}/{subject_id}"

    try:
        body = ctx.request("GET", path)
        listing = EntitlementListing.model_validate(body)
    except APIException as exc:
        logger.warning("Entitlement read rejected", extra={"path": path, "status_code": exc.status_code})
        raise EntitlementFetchError(f"Error: {exc}", detail=exc.status, status_code=exc.status_code) from exc
    except requests.RequestException as exc:
        logger.error("Entitlement read request error", extra={"path": path, "error": str(exc)})
        raise EntitlementFetchError(f"Error: {exc}", detail=str(exc)) from exc
    except ValidationError as exc:
        raise EntitlementFetchError("Error: invalid response", detail="invalid response") from exc

    lines = [render_entry(entry) for entry in listing.items]
    for line in lines:
        ctx.log.info(line)
    logger.info(
        "Rendered entitlements",
        extra={"kind": str(kind), "principal": name, "subject_id": subject_id, "count": len(lines)},
    )
    return listing.items


def create_entitlement(ctx: HttpContext, catalog_item: str, kind: PrincipalKind, subject_id: str) -> Dict[str, Any]:
    """Bind *subject_id* to *catalog_item*.

    Raises:
        EntitlementCreateError: If the backend rejects the definition or the
            request cannot be sent.
    """
    definition = EntitlementDefinition(
        catalogItemId=catalog_item,
        subjectType=kind.info.subject_type,
        subjectId=subject_id,
    )
    try:
        return ctx.request("POST", DEFINITIONS_PATH, payload=definition.model_dump())
    except APIException as exc:
        raise EntitlementCreateError(str(exc), detail=exc.status, status_code=exc.status_code) from exc
    except requests.RequestException as exc:
        raise EntitlementCreateError(str(exc), detail=str(exc)) from exc


def maybe_entitle(
    ctx: HttpContext,
    catalog_item: str,
    principal_name: str,
    kind: PrincipalKind,
    lookup_attribute: str,
    target: str,
) -> EntitleOutcome:
    """Entitle a user or group to an app, reporting the outcome as one line.

    Logs ``Entitled <kind> "<name>" to app "<target>"`` on success, otherwise
    ``Could not entitle <kind> "<name>" to app "<target>", error: <detail>``
    whether the lookup or the write failed.
    """
    if not kind.resolvable:
        exc = EntitlementCreateError(f"{kind} principals cannot be entitled", detail=f"{kind} principals cannot be entitled")
        return _entitle_failed(ctx, kind, principal_name, target, exc)

    try:
        subject_id = resolve_id(ctx, kind, principal_name, lookup_attribute)
        create_entitlement(ctx, catalog_item, kind, subject_id)
    except (ResolutionError, EntitlementCreateError) as exc:
        return _entitle_failed(ctx, kind, principal_name, target, exc)

    ctx.log.info(f'Entitled {kind} "{principal_name}" to app "{target}"')
    logger.info(
        "Entitlement created",
        extra={"kind": str(kind), "principal": principal_name, "subject_id": subject_id, "target": target},
    )
    return EntitleOutcome(ok=True, kind=kind, principal=principal_name, target=target)


def _entitle_failed(
    ctx: HttpContext,
    kind: PrincipalKind,
    principal_name: str,
    target: str,
    exc: EntitlectlError,
) -> EntitleOutcome:
    ctx.log.error(f'Could not entitle {kind} "{principal_name}" to app "{target}", error: {exc.detail}')
    logger.warning(
        "Entitlement not created",
        extra={
            "kind": str(kind),
            "principal": principal_name,
            "target": target,
            "stage": type(exc).__name__,
            "status_code": exc.status_code,
        },
    )
    return EntitleOutcome(
        ok=False,
        kind=kind,
        principal=principal_name,
        target=target,
        status_code=exc.status_code,
        detail=exc.detail,
    )
