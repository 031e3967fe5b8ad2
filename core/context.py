"""Execution context threaded through every engine operation.

The context owns the backend address, the bearer token and the output log.
The output log is what the end user sees (``Entitlements: …``, ``Entitled …``,
error lines); diagnostics go to :mod:`core.logger` instead.
"""

from __future__ import annotations

import dataclasses
import sys
from typing import Any, Dict, List, Mapping, Optional, Protocol, TextIO, runtime_checkable

from sdk.client import IdmClient

DEFAULT_BASE_PATH = "/SAAS/jersey/manager/api/"


@runtime_checkable
class OutputLog(Protocol):
    """Sink for user-facing info and error lines."""
    def info(self, line: str) -> None: ...  # noqa: E704
    def error(self, line: str) -> None: ...  # noqa: E704


class BufferedLog:
    """In-memory :class:`OutputLog`; read back with :meth:`info_string` / :meth:`err_string`."""

    def __init__(self) -> None:
        self.info_lines: List[str] = []
        self.error_lines: List[str] = []

    def info(self, line: str) -> None:
        self.info_lines.append(line)

    def error(self, line: str) -> None:
        self.error_lines.append(line)

    def info_string(self) -> str:
        return "".join(f"{line}\n" for line in self.info_lines)

    def err_string(self) -> str:
        return "".join(f"{line}\n" for line in self.error_lines)


class ConsoleLog:
    """:class:`OutputLog` writing info lines to stdout and errors to stderr."""

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> None:
        self._out = out
        self._err = err

    def info(self, line: str) -> None:
        print(line, file=self._out or sys.stdout)

    def error(self, line: str) -> None:
        print(line, file=self._err or sys.stderr)


@dataclasses.dataclass
class HttpContext:
    """State for one invocation: target, token and output log.

    ``token`` stays ``None`` until :func:`core.auth.acquire_token` succeeds
    or the caller supplies one.
    """

    log: OutputLog
    target_url: str
    base_path: str = DEFAULT_BASE_PATH
    token: Optional[str] = None
    timeout: int = 10
    _client: IdmClient = dataclasses.field(init=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, int) or self.timeout <= 0:
            raise ValueError(f"timeout must be a positive number of seconds, got {self.timeout!r}")
        self.target_url = self.target_url.rstrip("/")
        self._client = IdmClient(self.target_url, self.base_path, self.timeout)

    @property
    def client(self) -> IdmClient:
        return self._client

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send an authenticated API request relative to the base path."""
        return self._client.request(method, path, token=self.token, params=params, payload=payload)
