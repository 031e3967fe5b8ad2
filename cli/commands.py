"""Subcommand handlers for entitlectl.

Each public function handles one ``entitlement <action>`` and is invoked by
:mod:`cli.dispatcher` after argument validation and token acquisition.
Handlers return the process exit code.
"""

from cli.registry import registry
from core.context import HttpContext
from core.entitlements import get_entitlements, maybe_entitle
from core.errors import EntitlectlError
from core.logger import EntitlectlLogger
from core.principal import PrincipalKind

logger = EntitlectlLogger.get_logger()


@registry.register(
    "entitlement", "get",
    kinds=(PrincipalKind.USER, PrincipalKind.GROUP, PrincipalKind.APP),
    min_args=2,
    usage="<user|group|app> <name>",
    description="Show the entitlement definitions of a user, group or app",
)
def handle_get(ctx: HttpContext, kind: PrincipalKind, params: list[str]) -> int:
    """Handle ``entitlement get``; exit 1 on any failure."""
    name = params[0]
    logger.info("Command invoked", extra={"command": "entitlement get", "kind": str(kind), "principal": name})
    try:
        get_entitlements(ctx, kind, name)
    except EntitlectlError as exc:
        ctx.log.error(str(exc))
        return 1
    return 0


@registry.register(
    "entitlement", "create",
    kinds=(PrincipalKind.USER, PrincipalKind.GROUP),
    min_args=3,
    usage="<user|group> <name> <app>",
    description="Entitle a user or group to an app",
)
def handle_create(ctx: HttpContext, kind: PrincipalKind, params: list[str]) -> int:
    """Handle ``entitlement create``. The app name is both catalog item and target."""
    name, app = params[0], params[1]
    logger.info(
        "Command invoked",
        extra={"command": "entitlement create", "kind": str(kind), "principal": name, "target": app},
    )
    outcome = maybe_entitle(ctx, app, name, kind, kind.info.filter_attribute, app)
    return 0 if outcome.ok else 1
