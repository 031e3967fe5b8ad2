"""Subcommand registry mapping ``<group> <action>`` to a handler.

Handlers are bound to a ``<group> <action>`` pair (e.g. ``entitlement get``)
together with the argument rules the dispatcher enforces before any network
call is made: the minimum positional count and the principal kinds accepted
as the first positional.  Usage text is generated from the same entries.
"""

from __future__ import annotations

import dataclasses
from typing import Callable, Protocol, runtime_checkable

from core.context import HttpContext
from core.principal import PrincipalKind


# ── Handler protocol ─────────────────────────────────────────────────────────

@runtime_checkable
class CommandHandler(Protocol):
    """Handler receiving an authenticated context, the parsed kind and the remaining params."""
    def __call__(self, ctx: HttpContext, kind: PrincipalKind, params: list[str]) -> int: ...  # noqa: E704


# ── Registry entry ───────────────────────────────────────────────────────────

@dataclasses.dataclass(frozen=True, slots=True)
class CommandEntry:
    """Metadata for a single registered subcommand."""
    group: str                          # e.g. "entitlement"
    action: str                         # e.g. "get"
    kinds: tuple[PrincipalKind, ...]    # accepted first positional
    min_args: int                       # including the kind token
    usage: str                          # argument synopsis for USAGE text
    description: str
    handler: CommandHandler

    @property
    def kind_choices(self) -> str:
        """Human list of accepted kinds, e.g. ``"user, group or app"``."""
        names = [str(kind) for kind in self.kinds]
        if len(names) == 1:
            return names[0]
        return f"{', '.join(names[:-1])} or {names[-1]}"


# ── Registry ─────────────────────────────────────────────────────────────────

class CommandRegistry:
    """Singleton subcommand registry.

    Usage::

        @registry.register("entitlement", "get", kinds=(PrincipalKind.USER,),
                           min_args=2, usage="<user> <name>", description="Show entitlements")
        def handle_get(ctx, kind, params): ...

        entry = registry.get("entitlement", "get")
        exit_code = entry.handler(ctx, kind, params)
    """

    _instance: CommandRegistry | None = None
    _entries: dict[tuple[str, str], CommandEntry]

    def __new__(cls) -> CommandRegistry:
        if cls._instance is None:
            inst = super().__new__(cls)
            inst._entries = {}
            cls._instance = inst
        return cls._instance

    # ── decorator ────────────────────────────────────────────────────────

    def register(
        self,
        group: str,
        action: str,
        *,
        kinds: tuple[PrincipalKind, ...],
        min_args: int,
        usage: str,
        description: str,
    ) -> Callable[[CommandHandler], CommandHandler]:
        """Decorator that registers *handler* for ``<group> <action>``."""
        def decorator(func: CommandHandler) -> CommandHandler:
            self._entries[(group, action)] = CommandEntry(
                group=group,
                action=action,
                kinds=kinds,
                min_args=min_args,
                usage=usage,
                description=description,
                handler=func,
            )
            return func
        return decorator

    # ── lookup helpers ───────────────────────────────────────────────────

    def get(self, group: str, action: str) -> CommandEntry | None:
        """Return the entry for ``<group> <action>``, or ``None``."""
        return self._entries.get((group, action))

    def groups(self) -> list[str]:
        """Return registered group names in registration order."""
        return list(dict.fromkeys(group for group, _ in self._entries))

    def entries(self, group: str | None = None) -> list[CommandEntry]:
        """Return registered entries, optionally limited to one *group*."""
        return [entry for (g, _), entry in self._entries.items() if group is None or g == group]

    def usage_text(self, prog: str, group: str | None = None) -> str:
        """Render the USAGE block for all commands or a single *group*."""
        lines = ["USAGE:"]
        for entry in self.entries(group):
            lines.append(f"  {prog} [options] {entry.group} {entry.action} {entry.usage}")
            lines.append(f"      {entry.description}")
        return "\n".join(lines)


# Module-level singleton.
registry = CommandRegistry()
