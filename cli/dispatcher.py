"""Argument parsing and subcommand dispatch.

Routes ``<group> <action> <params…>`` to the handler registered in
:mod:`cli.commands`.  Argument counts and the principal-kind token are
validated before a context is built, so malformed invocations never touch
the network.
"""

import argparse
import logging

from config import (
    ACCESS_TOKEN,
    BASE_PATH,
    CLIENT_ID,
    CLIENT_SECRET,
    REQUEST_TIMEOUT,
    TARGET_URL,
    TOKEN_PATH,
)
from core.auth import ensure_token
from core.context import ConsoleLog, HttpContext, OutputLog
from core.errors import AuthError
from core.logger import EntitlectlLogger
from core.principal import PrincipalKind
from cli.registry import registry

# Import handlers module so @registry.register decorators execute.
import cli.commands as _commands  # noqa: F401

logger = EntitlectlLogger.get_logger()

PROG = "entitlectl"

# Exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class UsageError(Exception):
    """Raised by :class:`_ArgumentParser` instead of exiting the process."""


class _ArgumentParser(argparse.ArgumentParser):
    """Parser whose errors surface as :class:`UsageError` for :func:`run` to report."""

    def error(self, message: str):  # type: ignore[override]
        raise UsageError(message)


def _positive_int(raw: str) -> int:
    """argparse ``type`` for ``--timeout``: whole seconds, greater than zero."""
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid timeout {raw!r}, expected whole seconds") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"invalid timeout {raw!r}, must be greater than zero")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser; defaults come from :mod:`config`."""
    parser = _ArgumentParser(
        prog=PROG,
        description="Look up and create identity-manager entitlements for users, groups and apps.",
    )
    parser.add_argument(
        "--target",
        default=TARGET_URL,
        help="Identity manager URL, e.g. https://idm.example.com. Falls back to IDM_TARGET_URL.",
    )
    parser.add_argument(
        "--base-path",
        default=BASE_PATH,
        help="Versioned API path prefix. Falls back to IDM_BASE_PATH.",
    )
    parser.add_argument(
        "--token-path",
        default=TOKEN_PATH,
        help="OAuth2 token endpoint path. Falls back to IDM_TOKEN_PATH.",
    )
    parser.add_argument("--client-id", default=CLIENT_ID, help="OAuth2 client ID. Falls back to IDM_CLIENT_ID.")
    parser.add_argument(
        "--client-secret",
        default=CLIENT_SECRET,
        help="OAuth2 client secret. Falls back to IDM_CLIENT_SECRET.",
    )
    parser.add_argument(
        "--token",
        default=ACCESS_TOKEN,
        help="Pre-acquired bearer token; skips the client-credentials grant. Falls back to IDM_ACCESS_TOKEN.",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_int,
        default=REQUEST_TIMEOUT,
        help="Request timeout in seconds. Falls back to IDM_TIMEOUT.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug diagnostics on stderr.",
    )
    parser.add_argument("command", nargs="?", help="Command group, e.g. 'entitlement'.")
    parser.add_argument("action", nargs="?", help="Action within the group, e.g. 'get' or 'create'.")
    parser.add_argument("params", nargs="*", help="Action parameters.")
    return parser


def run(argv: list[str] | None = None, log: OutputLog | None = None) -> int:
    """Parse *argv*, validate it and run the matching handler.

    Returns the process exit code.  All user-facing output goes to *log*
    (stdout/stderr when omitted).
    """
    log = log or ConsoleLog()
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        log.error(f"{PROG}: {exc}")
        log.info(parser.format_usage().rstrip())
        return EXIT_USAGE

    if args.verbose:
        EntitlectlLogger.set_level(logging.DEBUG)

    # ── Usage paths ──────────────────────────────────────────────────────
    if not args.command:
        log.info(registry.usage_text(PROG))
        return EXIT_OK

    if args.command not in registry.groups():
        log.error(f"Unknown command '{args.command}'")
        log.info(registry.usage_text(PROG))
        return EXIT_USAGE

    if not args.action:
        log.info(registry.usage_text(PROG, args.command))
        return EXIT_OK

    entry = registry.get(args.command, args.action)
    if entry is None:
        log.error(f"Unknown action '{args.action}' for '{args.command}'")
        log.info(registry.usage_text(PROG, args.command))
        return EXIT_USAGE

    # ── Argument validation (no network yet) ─────────────────────────────
    params: list[str] = args.params
    if len(params) < entry.min_args:
        log.error(f"at least {entry.min_args} arguments must be given")
        return EXIT_USAGE

    try:
        kind = PrincipalKind.parse(params[0])
    except ValueError:
        kind = None
    if kind not in entry.kinds:
        log.error(f"First parameter of '{entry.action}' must be {entry.kind_choices}")
        return EXIT_USAGE

    if len(params) > entry.min_args:
        logger.debug("Ignoring extra parameters", extra={"extra_params": params[entry.min_args:]})

    target = (args.target or "").strip()
    if not target:
        log.error("no target URL given; use --target or set IDM_TARGET_URL")
        return EXIT_FAILURE

    # ── Context + token ──────────────────────────────────────────────────
    ctx = HttpContext(
        log=log,
        target_url=target,
        base_path=args.base_path,
        token=args.token or None,
        timeout=args.timeout,
    )
    try:
        ensure_token(ctx, args.client_id, args.client_secret, args.token_path)
    except AuthError as exc:
        log.error(str(exc))
        return EXIT_FAILURE

    logger.debug(
        "Dispatching command",
        extra={"command": entry.group, "action": entry.action, "kind": str(kind)},
    )
    return entry.handler(ctx, kind, params[1:])
