"""Tests for wren.routing.router — registration, groups and dispatch."""

import json

import pytest

from wren.errors import ConfigurationError, GroupStackError, HTTPError
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.registrar import RouteRegistrar
from wren.routing.router import Router
from wren.testing import TestClient


def _ok(request: Request) -> str:
    return "ok"


class TestAddRoute:
    def test_returns_registrar(self) -> None:
        r = Router()
        assert isinstance(r.add_route("GET", "/", _ok), RouteRegistrar)

    def test_method_uppercased(self) -> None:
        r = Router()
        r.add_route("get", "/users", _ok)
        assert r.routes[0].method == "GET"

    def test_unknown_method_rejected(self) -> None:
        r = Router()
        with pytest.raises(ConfigurationError, match="Unsupported HTTP method"):
            r.add_route("TRACE", "/users", _ok)

    def test_invalid_action_rejected(self) -> None:
        r = Router()
        with pytest.raises(ConfigurationError, match="Invalid route action"):
            r.get("/users", 42)

    def test_leading_slash_added(self) -> None:
        r = Router()
        r.get("users", _ok)
        assert r.routes[0].path == "/users"

    def test_trailing_slash_stripped(self) -> None:
        r = Router()
        r.get("/users/", _ok)
        assert r.routes[0].path == "/users"

    def test_root_path(self) -> None:
        r = Router()
        r.get("/", _ok)
        r.get("", _ok)
        assert [route.path for route in r.routes] == ["/", "/"]

    def test_template_not_validated_at_registration(self) -> None:
        r = Router()
        r.get("/users/{id", _ok)
        assert r.routes[0].path == "/users/{id"

    def test_verb_helpers(self) -> None:
        r = Router()
        r.get("/a", _ok)
        r.post("/a", _ok)
        r.put("/a", _ok)
        r.patch("/a", _ok)
        r.delete("/a", _ok)
        r.any("/a", _ok)
        assert [route.method for route in r.routes] == [
            "GET",
            "POST",
            "PUT",
            "PATCH",
            "DELETE",
            "ANY",
        ]

    def test_name_argument_registers_name(self) -> None:
        r = Router()
        r.get("/users", _ok, name="users.index")
        assert r.names == {"users.index": "/users"}
        assert r.routes[0].name == "users.index"


class TestGroups:
    def test_prefix_applied(self) -> None:
        r = Router()
        r.group(prefix="admin", body=lambda g: g.get("/users", _ok))
        assert r.routes[0].path == "/admin/users"

    def test_prefix_slashes_trimmed(self) -> None:
        r = Router()
        r.group(prefix="/admin/", body=lambda g: g.get("users", _ok))
        assert r.routes[0].path == "/admin/users"

    def test_nested_prefixes(self) -> None:
        r = Router()

        def api(g: Router) -> None:
            g.group(prefix="v1", body=lambda inner: inner.get("/users", _ok))

        r.group(prefix="api", body=api)
        r.get("/home", _ok)

        assert [route.path for route in r.routes] == ["/api/v1/users", "/home"]

    def test_context_manager_form(self) -> None:
        r = Router()
        with r.group(prefix="api") as api:
            assert api is r
            with api.group(prefix="v1"):
                r.get("/users", _ok)
            r.get("/status", _ok)
        r.get("/home", _ok)

        assert [route.path for route in r.routes] == ["/api/v1/users", "/api/status", "/home"]
        assert r.group_depth == 0

    def test_empty_prefix_skipped(self) -> None:
        r = Router()
        with r.group(prefix="api"), r.group(middleware=["auth"]):
            r.get("/users", _ok)
        assert r.routes[0].path == "/api/users"

    def test_group_root_route(self) -> None:
        r = Router()
        with r.group(prefix="admin"):
            r.get("/", _ok)
        assert r.routes[0].path == "/admin"

    def test_middleware_inherited_outermost_first(self) -> None:
        r = Router()
        with r.group(middleware=["outer"]), r.group(middleware=["inner"]):
            r.get("/x", _ok).middleware("own")

        names = [ref.name for ref in r.routes[0].middleware]
        assert names == ["outer", "inner", "own"]

    def test_group_context_isolated(self) -> None:
        r = Router()
        with r.group(prefix="admin", middleware=["auth"]):
            r.get("/dashboard", _ok)
        r.get("/public", _ok)

        public = r.routes[1]
        assert public.path == "/public"
        assert public.middleware == []

    def test_frame_popped_when_body_raises(self) -> None:
        r = Router()

        def broken(g: Router) -> None:
            g.get("/a", _ok)
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            r.group(prefix="admin", body=broken)

        r.get("/b", _ok)
        assert r.routes[1].path == "/b"
        assert r.group_depth == 0

    def test_route_middleware_does_not_leak_into_siblings(self) -> None:
        r = Router()
        with r.group(middleware=["auth"]):
            r.get("/a", _ok).middleware("extra")
            r.get("/b", _ok)

        assert [ref.name for ref in r.routes[1].middleware] == ["auth"]

    def test_unbalanced_pop_is_fatal(self) -> None:
        r = Router()
        with pytest.raises(GroupStackError):
            r._groups.pop()


class TestDispatch:
    def test_static_route(self) -> None:
        r = Router()
        r.get("/ping", lambda request: Response(body="pong"))

        response = TestClient(r).get("/ping")

        assert response.status == 200
        assert response.text == "pong"

    def test_unknown_path_is_404(self) -> None:
        r = Router()
        r.get("/ping", _ok)

        response = TestClient(r).get("/unknown")

        assert response.status == 404
        assert "404" in response.text

    def test_method_mismatch_is_404(self) -> None:
        r = Router()
        r.get("/users", _ok)

        assert TestClient(r).post("/users").status == 404

    def test_any_matches_every_method(self) -> None:
        r = Router()
        r.any("/hook", lambda request: request.method)
        client = TestClient(r)

        for method in ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"):
            assert client.request(method, "/hook").text == method

    def test_root(self) -> None:
        r = Router()
        r.get("/", lambda request: "home")

        assert TestClient(r).get("/").text == "home"

    def test_query_string_not_matched(self) -> None:
        r = Router()
        r.get("/search", lambda request: request.query_param("q"))

        assert TestClient(r).get("/search?q=wren").text == "wren"

    def test_params_passed_positionally_in_template_order(self) -> None:
        r = Router()

        def comment(request: Request, post: str, comment: str) -> str:
            return f"{post}:{comment}"

        r.get("/posts/{post}/comments/{comment}", comment)

        assert TestClient(r).get("/posts/1/comments/5").text == "1:5"

    def test_params_bound_on_request(self) -> None:
        r = Router()
        r.get("/users/{id}", lambda request, id: dict(request.path_params))

        response = TestClient(r).get("/users/42")

        assert json.loads(response.text) == {"id": "42"}

    def test_trailing_segment_not_matched(self) -> None:
        r = Router()
        r.get("/posts/{post}/comments/{comment}", _ok)

        assert TestClient(r).get("/posts/1/comments/5/extra").status == 404

    def test_first_registered_wins(self) -> None:
        r = Router()
        r.get("/users/{id}", lambda request, id: "param")
        r.get("/users/me", lambda request: "static")

        assert TestClient(r).get("/users/me").text == "param"

    def test_registration_order_tie_break_other_way(self) -> None:
        r = Router()
        r.get("/users/me", lambda request: "static")
        r.get("/users/{id}", lambda request, id: "param")
        client = TestClient(r)

        assert client.get("/users/me").text == "static"
        assert client.get("/users/7").text == "param"

    def test_dict_result_is_json(self) -> None:
        r = Router()
        r.get("/status", lambda request: {"status": "ok"})

        response = TestClient(r).get("/status")

        assert response.status == 200
        assert response.text == '{"status":"ok"}'
        assert response.header("Content-Type").startswith("application/json")

    def test_string_result(self) -> None:
        r = Router()
        r.get("/", lambda request: "Hello World")

        response = TestClient(r).get("/")

        assert response.status == 200
        assert response.text == "Hello World"

    def test_none_result_is_empty_200(self) -> None:
        r = Router()
        r.post("/fire", lambda request: None)

        response = TestClient(r).post("/fire")

        assert response.status == 200
        assert response.text == ""

    def test_response_passthrough(self) -> None:
        r = Router()
        created = Response(body="made", status=201)
        r.post("/things", lambda request: created)

        assert TestClient(r).post("/things") is created

    def test_http_error_becomes_response(self) -> None:
        r = Router()

        def forbidden(request: Request) -> str:
            raise HTTPError(status=403, detail="Nope", headers=(("X-Reason", "test"),))

        r.get("/secret", forbidden)
        response = TestClient(r).get("/secret")

        assert response.status == 403
        assert response.text == "Nope"
        assert response.header("X-Reason") == "test"

    def test_configuration_error_propagates(self) -> None:
        r = Router()
        r.get("/x", _ok).middleware("wren_missing_module:Nothing")

        with pytest.raises(ConfigurationError, match="Middleware not found"):
            TestClient(r).get("/x")

    def test_malformed_placeholder_surfaces_at_dispatch(self) -> None:
        r = Router()
        r.get("/users/{id", _ok)

        with pytest.raises(ConfigurationError, match="Malformed placeholder"):
            TestClient(r).get("/users/1")

    def test_idempotent(self) -> None:
        r = Router()
        r.get("/users/{id}", lambda request, id: {"id": id})
        request = Request.create("GET", "/users/9")

        first = r.handle(request)
        second = r.handle(request)

        assert first == second
        assert request.path_params == {}

    def test_static_routes_property(self) -> None:
        paths = ["/", "/a", "/a/b", "/c/d/e"]
        r = Router()
        for path in paths:
            r.get(path, lambda request, _p=path: _p)
        client = TestClient(r)

        for path in paths:
            assert client.get(path).text == path
        assert client.get("/a/b/c").status == 404
        assert client.get("/b").status == 404

    def test_dispatch_writes_bytes(self) -> None:
        r = Router()
        r.get("/", lambda request: "hi")
        chunks: list[bytes] = []

        r.dispatch(Request.create("GET", "/"), chunks.append)

        raw = b"".join(chunks)
        assert raw.startswith(b"HTTP/1.1 200 OK\r\n")
        assert raw.endswith(b"\r\n\r\nhi")


class TestMiddlewareDispatch:
    def test_route_middleware_runs(self) -> None:
        r = Router()

        def stamp(request: Request, next) -> Response:
            return next(request).with_header("X-Stamp", "1")

        r.get("/x", _ok).middleware(stamp)

        assert TestClient(r).get("/x").header("X-Stamp") == "1"

    def test_group_middleware_wraps_route_middleware(self) -> None:
        calls: list[str] = []

        def tracer(label: str):
            def mw(request: Request, next) -> Response:
                calls.append(f"{label}.before")
                response = next(request)
                calls.append(f"{label}.after")
                return response

            return mw

        r = Router()

        def action(request: Request) -> str:
            calls.append("action")
            return "ok"

        with r.group(middleware=[tracer("group")]):
            r.get("/x", action).middleware(tracer("route"))

        TestClient(r).get("/x")

        assert calls == ["group.before", "route.before", "action", "route.after", "group.after"]

    def test_short_circuit_skips_action(self) -> None:
        called = []
        r = Router()

        def block(request: Request, next) -> Response:
            return Response.unauthorized()

        r.get("/x", lambda request: called.append(True)).middleware(block)

        response = TestClient(r).get("/x")

        assert response.status == 401
        assert called == []

    def test_middleware_added_after_registration_visible(self) -> None:
        r = Router()
        registrar = r.get("/x", _ok)
        client = TestClient(r)

        assert client.get("/x").header("X-Late") is None

        registrar.middleware(lambda request, next: next(request).with_header("X-Late", "yes"))

        assert client.get("/x").header("X-Late") == "yes"

    def test_middleware_can_replace_request(self) -> None:
        r = Router()

        def upper(request: Request, next) -> Response:
            return next(request.with_path_params({"name": request.path_params["name"].upper()}))

        def greet(request: Request, name: str) -> str:
            return f"{name}/{request.path_params['name']}"

        r.get("/hi/{name}", greet).middleware(upper)

        assert TestClient(r).get("/hi/bob").text == "bob/BOB"

    def test_aliased_identifier(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import sys
        import types

        class Tag:
            def handle(self, request: Request, next) -> Response:
                return next(request).with_header("X-Tag", "aliased")

        mod = types.ModuleType("_wren_fake_mw")
        mod.Tag = Tag  # type: ignore[attr-defined]
        monkeypatch.setitem(sys.modules, "_wren_fake_mw", mod)

        from wren.config import AppConfig

        r = Router(AppConfig(middleware_aliases={"tag": "_wren_fake_mw:Tag"}))
        r.get("/x", _ok).middleware("tag")

        assert TestClient(r).get("/x").header("X-Tag") == "aliased"

    def test_injected_resolver(self) -> None:
        seen: list[str] = []

        def resolver(name: str):
            seen.append(name)
            return lambda request, next: next(request).with_header("X-Name", name)

        r = Router(resolver=resolver)
        r.get("/x", _ok).middleware("auth")

        assert TestClient(r).get("/x").header("X-Name") == "auth"
        assert seen == ["auth"]

    def test_registry_resolver_unknown_name_is_configuration_error(self) -> None:
        r = Router(resolver={"known": lambda request, next: next(request)}.__getitem__)
        r.get("/x", _ok).middleware("missing")

        with pytest.raises(ConfigurationError, match="Middleware not found"):
            TestClient(r).get("/x")


class TestFreeze:
    def test_freeze_blocks_registration(self) -> None:
        r = Router()
        r.get("/", _ok)
        r.freeze()

        with pytest.raises(ConfigurationError, match="frozen"):
            r.get("/late", _ok)

    def test_freeze_compiles_templates(self) -> None:
        r = Router()
        r.get("/users/{id}}", _ok)

        with pytest.raises(ConfigurationError, match="Malformed placeholder"):
            r.freeze()

    def test_frozen_router_still_dispatches(self) -> None:
        r = Router()
        r.get("/", _ok)
        r.freeze()

        assert TestClient(r).get("/").text == "ok"

    def test_freeze_resolves_middleware(self) -> None:
        r = Router(resolver={}.__getitem__)
        r.get("/x", _ok).middleware("auth")

        with pytest.raises(ConfigurationError, match="Middleware not found: 'auth'"):
            r.freeze()

    def test_freeze_checks_controller_method(self) -> None:
        class Users:
            def index(self, request: Request) -> str:
                return "users"

        r = Router()
        r.get("/users", (Users, "index"))
        r.get("/users/{id}", (Users, "show"))

        with pytest.raises(ConfigurationError, match="Method 'show' not found in controller"):
            r.freeze()

    def test_freeze_checks_controller_identifier(self) -> None:
        r = Router()
        r.get("/users", ("wren_no_such_module:Users", "index"))

        with pytest.raises(ConfigurationError, match="Controller not found"):
            r.freeze()

    def test_freeze_does_not_instantiate_controllers(self) -> None:
        built: list[str] = []

        class Users:
            def __init__(self) -> None:
                built.append("Users")

            def index(self, request: Request) -> str:
                return "users"

        r = Router()
        r.get("/users", (Users, "index"))
        r.freeze()

        assert built == []
        assert TestClient(r).get("/users").text == "users"
        assert built == ["Users"]
