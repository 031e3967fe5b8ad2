"""Shared fixtures: a fake identity manager patched in behind ``requests``."""

import os
import sys
import tempfile
from unittest.mock import patch

import pytest

# Ensure the project root is importable and keep diagnostics out of the repo.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ.setdefault("ENTITLECTL_LOG_DIR", tempfile.mkdtemp(prefix="entitlectl-logs-"))

from helpers import TARGET, FakeBackend  # noqa: E402


@pytest.fixture()
def backend():
    """Install a :class:`helpers.FakeBackend` for the duration of a test.

    Usage::

        fake = backend({scim_route("Users", "userName", "foo"): make_response(body={...})})
    """
    patchers = []

    def install(routes) -> FakeBackend:
        fake = FakeBackend(routes)
        patcher = patch("sdk.client.requests.request", side_effect=fake)
        patcher.start()
        patchers.append(patcher)
        return fake

    yield install
    for patcher in patchers:
        patcher.stop()


@pytest.fixture()
def ctx():
    """An unauthenticated context on ``TARGET`` with base path ``/``."""
    from core.context import BufferedLog, HttpContext

    return HttpContext(log=BufferedLog(), target_url=TARGET, base_path="/")
