"""Core engine for token acquisition, identity resolution and entitlements.

This package is front-end agnostic. It must NEVER import from ``cli/`` or ``config``.

Only the leaf modules are re-exported here: ``sdk`` imports :mod:`core.logger`,
so the modules built on :class:`sdk.client.IdmClient` (``core.context``,
``core.auth``, ``core.identity``, ``core.entitlements``) are imported directly.
"""

from core.errors import (
    AuthError,
    EntitlectlError,
    EntitlementCreateError,
    EntitlementFetchError,
    ResolutionError,
)
from core.logger import EntitlectlLogger
from core.principal import PrincipalKind

__all__ = [
    "AuthError",
    "EntitlectlError",
    "EntitlementCreateError",
    "EntitlementFetchError",
    "ResolutionError",
    "EntitlectlLogger",
    "PrincipalKind",
]
