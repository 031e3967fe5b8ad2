"""Test helpers: real ``requests.Response`` builders and a path-keyed fake backend."""

import dataclasses
import json
from typing import Any, Callable, Dict, Union
from urllib.parse import quote_plus, urlsplit

import requests

TARGET = "https://idm.test"
TOKEN_ROUTE = "POST/SAAS/API/1.0/oauth2/token"


def make_response(status: int = 200, body: Any = None, text: str | None = None) -> requests.Response:
    """Build a real :class:`requests.Response` with a JSON or text body."""
    resp = requests.Response()
    resp.status_code = status
    resp.encoding = "utf-8"
    if body is not None:
        resp._content = json.dumps(body).encode("utf-8")
        resp.headers["Content-Type"] = "application/json"
    elif text is not None:
        resp._content = text.encode("utf-8")
        resp.headers["Content-Type"] = "text/plain"
    else:
        resp._content = b""
    return resp


def scim_route(collection: str, attribute: str, name: str) -> str:
    """Route key of a filtered SCIM lookup under base path ``/``."""
    return f"GET/scim/{collection}?count=10000&filter=" + quote_plus(f'{attribute} eq "{name}"')


@dataclasses.dataclass
class Call:
    method: str
    route: str
    kwargs: Dict[str, Any]


Route = Union[requests.Response, Callable[[Call], requests.Response]]


class FakeBackend:
    """Stand-in for ``requests.request`` keyed by ``METHOD + path[?query]``.

    Unregistered routes answer 404 with an empty body.
    """

    def __init__(self, routes: Dict[str, Route]) -> None:
        self.routes = routes
        self.calls: list[Call] = []

    def __call__(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        parts = urlsplit(url)
        route = f"{method}{parts.path}" + (f"?{parts.query}" if parts.query else "")
        call = Call(method, route, kwargs)
        self.calls.append(call)
        handler = self.routes.get(route)
        if handler is None:
            return make_response(404)
        return handler(call) if callable(handler) else handler

    def routes_called(self) -> list[str]:
        return [call.route for call in self.calls]
