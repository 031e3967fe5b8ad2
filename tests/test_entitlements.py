"""Tests for entitlement reads and best-effort creation."""

import sys
import os

import pytest
import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.context import BufferedLog, HttpContext
from core.entitlements import EntitleOutcome, get_entitlements, maybe_entitle, render_entry
from core.errors import EntitlementFetchError, ResolutionError
from core.principal import PrincipalKind
from helpers import TARGET, make_response, scim_route

DEFINITIONS_ROUTE = "POST/entitlements/definitions"


def _id_reply(resource_id: str):
    return make_response(
        200, {"resources": [{"userName": "foo", "displayName": "foo", "id": resource_id}]}
    )


def _entitlement_routes(rtype: str, rid: str) -> dict:
    """Both SCIM lookups plus the definitions read for one subject."""
    return {
        scim_route("Users", "userName", "foo"): _id_reply(rid),
        scim_route("Groups", "displayName", "foo"): _id_reply(rid),
        f"GET/entitlements/definitions/{rtype.lower()}/{rid}": make_response(
            200, {"items": [{"Entitlements": "bar"}]}
        ),
    }


# ── render_entry ─────────────────────────────────────────────────────────────


class TestRenderEntry:
    def test_entitlements_field(self) -> None:
        assert render_entry({"Entitlements": "bar"}) == "Entitlements: bar"

    def test_opaque_entry_serialised(self) -> None:
        assert render_entry({"b": 2, "a": "x"}) == 'Entitlements: {"a":"x","b":2}'

    @pytest.mark.parametrize("entry,expected", [("bar", "bar"), (42, "42"), (["a", "b"], '["a","b"]')])
    def test_non_mapping_entries(self, entry, expected) -> None:
        assert render_entry(entry) == f"Entitlements: {expected}"

    def test_structured_field_value_is_json(self) -> None:
        assert render_entry({"Entitlements": ["a", "b"]}) == 'Entitlements: ["a","b"]'
        assert render_entry({"Entitlements": {"id": 1}}) == 'Entitlements: {"id":1}'


# ── get_entitlements ─────────────────────────────────────────────────────────


class TestGetEntitlements:
    @pytest.mark.parametrize(
        "kind,rtype,rid",
        [
            (PrincipalKind.USER, "Users", "testid67"),
            (PrincipalKind.GROUP, "Groups", "testid67"),
            (PrincipalKind.APP, "catalogitems", "foo"),
        ],
    )
    def test_renders_listing(self, backend, ctx, kind, rtype, rid) -> None:
        backend(_entitlement_routes(rtype, rid))

        items = get_entitlements(ctx, kind, "foo")
        assert items == [{"Entitlements": "bar"}]
        assert "Entitlements: bar" in ctx.log.info_string()
        assert ctx.log.err_string() == ""

    def test_app_skips_scim_lookup(self, backend, ctx) -> None:
        fake = backend(_entitlement_routes("catalogitems", "foo"))

        get_entitlements(ctx, PrincipalKind.APP, "foo")
        assert fake.routes_called() == ["GET/entitlements/definitions/catalogitems/foo"]

    def test_backend_order_preserved(self, backend, ctx) -> None:
        routes = _entitlement_routes("users", "u1")
        routes["GET/entitlements/definitions/users/u1"] = make_response(
            200, {"items": [{"Entitlements": "zeta"}, {"Entitlements": "alpha"}, {"Entitlements": "mid"}]}
        )
        backend(routes)

        get_entitlements(ctx, PrincipalKind.USER, "foo")
        assert ctx.log.info_lines == ["Entitlements: zeta", "Entitlements: alpha", "Entitlements: mid"]

    def test_scalar_entries(self, backend, ctx) -> None:
        backend({
            "GET/entitlements/definitions/catalogitems/foo": make_response(200, {"items": ["bar", "baz"]}),
        })

        assert get_entitlements(ctx, PrincipalKind.APP, "foo") == ["bar", "baz"]
        assert ctx.log.info_lines == ["Entitlements: bar", "Entitlements: baz"]
        assert ctx.log.err_string() == ""

    def test_empty_listing_logs_nothing(self, backend, ctx) -> None:
        routes = _entitlement_routes("users", "u1")
        routes["GET/entitlements/definitions/users/u1"] = make_response(200, {"items": []})
        backend(routes)

        assert get_entitlements(ctx, PrincipalKind.USER, "foo") == []
        assert ctx.log.info_string() == ""

    def test_unknown_user_entitlement(self, backend, ctx) -> None:
        backend({
            scim_route("Users", "userName", "foo"): make_response(
                200, {"Resources": [{"userName": "foo", "displayName": "foo", "id": "test-fail"}]}
            ),
            "GET/entitlements/definitions/users/test-fail": make_response(
                404, text="test: foo does not exist"
            ),
        })

        with pytest.raises(EntitlementFetchError) as exc_info:
            get_entitlements(ctx, PrincipalKind.USER, "foo")
        assert "Error: 404 Not Found" in str(exc_info.value)
        assert "test: foo does not exist" in str(exc_info.value)
        assert exc_info.value.status_code == 404
        assert ctx.log.info_string() == ""

    def test_resolution_failure_short_circuits(self, backend, ctx) -> None:
        fake = backend({})

        with pytest.raises(ResolutionError) as exc_info:
            get_entitlements(ctx, PrincipalKind.USER, "foo")
        assert "Error getting SCIM Users ID of foo: 404 Not Found" in str(exc_info.value)
        assert fake.routes_called() == [scim_route("Users", "userName", "foo")]
        assert ctx.log.info_string() == ""


# ── maybe_entitle ────────────────────────────────────────────────────────────


class TestMaybeEntitle:
    def test_create_for_user(self, backend, ctx) -> None:
        fake = backend({
            scim_route("Users", "userName", "patrick"): make_response(
                200, {"resources": [{"userName": "patrick", "id": "12345"}]}
            ),
            DEFINITIONS_ROUTE: make_response(200, {"test": "unused"}),
        })

        outcome = maybe_entitle(ctx, "baby", "patrick", PrincipalKind.USER, "userName", "dance")
        assert ctx.log.err_string() == ""
        assert 'Entitled user "patrick" to app "dance"' in ctx.log.info_string()
        assert outcome == EntitleOutcome(ok=True, kind=PrincipalKind.USER, principal="patrick", target="dance")

        post = fake.calls[-1]
        assert post.route == DEFINITIONS_ROUTE
        assert post.kwargs["json"] == {
            "catalogItemId": "baby",
            "subjectType": "USERS",
            "subjectId": "12345",
            "activationPolicy": "AUTOMATIC",
        }

    def test_create_for_group(self, backend, ctx) -> None:
        fake = backend({
            scim_route("Groups", "displayName", "Engineering"): make_response(200, {"Resources": [{"id": "g-7"}]}),
            DEFINITIONS_ROUTE: make_response(201, {}),
        })

        outcome = maybe_entitle(ctx, "slack", "Engineering", PrincipalKind.GROUP, "displayName", "Slack")
        assert outcome.ok
        assert ctx.log.info_lines == ['Entitled group "Engineering" to app "Slack"']
        assert fake.calls[-1].kwargs["json"]["subjectType"] == "GROUPS"

    def test_failed_for_unknown_user(self, backend, ctx) -> None:
        fake = backend({})

        outcome = maybe_entitle(ctx, "baby", "patrick", PrincipalKind.USER, "userName", "dance")
        assert ctx.log.info_string() == ""
        assert (
            'Could not entitle user "patrick" to app "dance", error: 404 Not Found'
            in ctx.log.err_string()
        )
        assert DEFINITIONS_ROUTE not in fake.routes_called()
        assert not outcome.ok
        assert outcome.status_code == 404

    def test_failed_for_empty_lookup(self, backend, ctx) -> None:
        backend({scim_route("Users", "userName", "patrick"): make_response(200, {"Resources": []})})

        maybe_entitle(ctx, "baby", "patrick", PrincipalKind.USER, "userName", "dance")
        assert ctx.log.error_lines == ['Could not entitle user "patrick" to app "dance", error: not found']

    def test_creation_rejected(self, backend, ctx) -> None:
        backend({
            scim_route("Users", "userName", "patrick"): make_response(200, {"Resources": [{"id": "12345"}]}),
            DEFINITIONS_ROUTE: make_response(400, {"message": "duplicate entitlement"}),
        })

        outcome = maybe_entitle(ctx, "baby", "patrick", PrincipalKind.USER, "userName", "dance")
        assert ctx.log.info_string() == ""
        assert ctx.log.error_lines == ['Could not entitle user "patrick" to app "dance", error: 400 Bad Request']
        assert outcome.status_code == 400

    def test_transport_error_is_logged_not_raised(self, backend, ctx) -> None:
        def offline(call):
            raise requests.ConnectionError("offline")

        backend({
            scim_route("Users", "userName", "patrick"): make_response(200, {"Resources": [{"id": "12345"}]}),
            DEFINITIONS_ROUTE: offline,
        })

        outcome = maybe_entitle(ctx, "baby", "patrick", PrincipalKind.USER, "userName", "dance")
        assert not outcome.ok
        assert len(ctx.log.error_lines) == 1

    def test_app_principal_rejected(self, backend, ctx) -> None:
        fake = backend({})

        outcome = maybe_entitle(ctx, "baby", "other", PrincipalKind.APP, "name", "dance")
        assert not outcome.ok
        assert len(ctx.log.error_lines) == 1
        assert fake.calls == []

    @pytest.mark.parametrize("create_status", [200, 409])
    def test_exactly_one_line_per_call(self, backend, ctx, create_status) -> None:
        backend({
            scim_route("Users", "userName", "patrick"): make_response(200, {"Resources": [{"id": "12345"}]}),
            DEFINITIONS_ROUTE: make_response(create_status, {}),
        })

        for calls in range(1, 4):
            maybe_entitle(ctx, "baby", "patrick", PrincipalKind.USER, "userName", "dance")
            assert len(ctx.log.info_lines) + len(ctx.log.error_lines) == calls

        if create_status == 200:
            assert ctx.log.error_lines == []
        else:
            assert ctx.log.info_lines == []


# ── HttpContext ──────────────────────────────────────────────────────────────


class TestHttpContext:
    @pytest.mark.parametrize("timeout", [0, -5])
    def test_non_positive_timeout_rejected(self, timeout) -> None:
        with pytest.raises(ValueError, match="timeout must be a positive number"):
            HttpContext(log=BufferedLog(), target_url=TARGET, timeout=timeout)

    def test_trailing_slash_stripped(self) -> None:
        ctx = HttpContext(log=BufferedLog(), target_url=f"{TARGET}/", timeout=3)
        assert ctx.target_url == TARGET
        assert ctx.client._timeout == 3
