"""Tests for roost.dispatch — action resolution and strategies."""

import sys
import types
from typing import Any

import pytest

from roost.dispatch import (
    Dispatcher,
    Strategy,
    fill_template,
    import_string,
    load_object,
    resolve_action,
    resolve_strategy,
)
from roost.errors import BadRouteError, BadRouteKind, BadStrategyError, NotFound
from roost.routing.route import RouteMatch
from roost.routing.router import Router


class BlogPostController:
    def show(self, **params: Any) -> str:
        return f"post {params['id']}"

    def list_all(self, **params: Any) -> str:
        return "all posts"


class JsonStrategy:
    def call(self, match: RouteMatch, action: Any) -> dict[str, Any]:
        return {"data": action(**match.params), "route": match.route.pattern}


class AsyncStrategy:
    async def call(self, match: RouteMatch, action: Any) -> str:
        return f"async {action(**match.merged_params)}"


def ping() -> str:
    return "pong"


@pytest.fixture
def _fake_handlers_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake handlers module on sys.modules."""
    mod = types.ModuleType("_fake_roost_handlers")
    mod.BlogPostController = BlogPostController  # type: ignore[attr-defined]
    mod.JsonStrategy = JsonStrategy  # type: ignore[attr-defined]
    mod.ping = ping  # type: ignore[attr-defined]
    mod.not_callable = 42  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_roost_handlers", mod)


class TestFillTemplate:
    def test_plain(self) -> None:
        assert fill_template("{action}", {"action": "list-all"}) == "list_all"

    def test_camel(self) -> None:
        assert fill_template("{kind}Controller", {"kind": "blog-post"}, camel=True) == (
            "BlogPostController"
        )

    def test_unknown_left_in_place(self) -> None:
        assert fill_template("{missing}.x", {}) == "{missing}.x"


@pytest.mark.usefixtures("_fake_handlers_module")
class TestImportString:
    def test_load_object_propagates_import_errors(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            load_object("nonexistent_module_xyz", "thing")

    def test_load_object_walks_attributes(self) -> None:
        assert load_object("_fake_roost_handlers", "BlogPostController.show") is (
            BlogPostController.show
        )

    def test_function(self) -> None:
        assert import_string("_fake_roost_handlers:ping") is ping

    def test_dotted_attribute(self) -> None:
        assert import_string("_fake_roost_handlers:BlogPostController.show") is (
            BlogPostController.show
        )

    def test_missing_colon(self) -> None:
        with pytest.raises(BadRouteError) as exc_info:
            import_string("_fake_roost_handlers.ping")
        assert exc_info.value.kind is BadRouteKind.INVALID_ACTION

    def test_missing_module(self) -> None:
        with pytest.raises(BadRouteError):
            import_string("nonexistent_module_xyz:thing")

    def test_missing_attribute(self) -> None:
        with pytest.raises(BadRouteError):
            import_string("_fake_roost_handlers:nothing")


@pytest.mark.usefixtures("_fake_handlers_module")
class TestResolveAction:
    def test_callable(self) -> None:
        assert resolve_action(ping, {}) is ping

    def test_function_import_string(self) -> None:
        assert resolve_action("_fake_roost_handlers:ping", {}) is ping

    def test_class_method_import_string(self) -> None:
        handler = resolve_action("_fake_roost_handlers:BlogPostController.show", {})
        assert handler(id="1") == "post 1"

    def test_templated_import_string(self) -> None:
        handler = resolve_action(
            "_fake_roost_handlers:{kind}Controller.{action}",
            {"kind": "blog-post", "action": "list-all"},
        )
        assert handler() == "all posts"

    def test_tuple_with_class(self) -> None:
        handler = resolve_action((BlogPostController, "show"), {})
        assert handler(id="2") == "post 2"

    def test_tuple_with_instance(self) -> None:
        controller = BlogPostController()
        handler = resolve_action((controller, "show"), {})
        assert handler.__self__ is controller  # type: ignore[attr-defined]

    def test_container_builds_classes(self) -> None:
        built: list[type] = []

        def container(cls: type) -> Any:
            built.append(cls)
            return cls()

        resolve_action((BlogPostController, "show"), {}, container)
        assert built == [BlogPostController]

    def test_missing_method(self) -> None:
        with pytest.raises(BadRouteError) as exc_info:
            resolve_action((BlogPostController, "destroy"), {})
        assert exc_info.value.kind is BadRouteKind.INVALID_ACTION

    def test_not_callable(self) -> None:
        with pytest.raises(BadRouteError):
            resolve_action("_fake_roost_handlers:not_callable", {})

    def test_unusable_action(self) -> None:
        with pytest.raises(BadRouteError):
            resolve_action(42, {})


@pytest.mark.usefixtures("_fake_handlers_module")
class TestResolveStrategy:
    def test_instance(self) -> None:
        strategy = JsonStrategy()
        assert resolve_strategy(strategy) is strategy

    def test_class(self) -> None:
        assert isinstance(resolve_strategy(JsonStrategy), JsonStrategy)

    def test_import_string(self) -> None:
        assert isinstance(resolve_strategy("_fake_roost_handlers:JsonStrategy"), JsonStrategy)

    def test_protocol(self) -> None:
        assert isinstance(JsonStrategy(), Strategy)

    def test_bad_strategy(self) -> None:
        class NoCall:
            pass

        with pytest.raises(BadStrategyError):
            resolve_strategy(NoCall)


class TestDispatcher:
    @pytest.mark.asyncio
    async def test_plain_callable(self) -> None:
        r = Router()
        r.get("/hello/{name}", lambda name: f"hi {name}")
        assert await Dispatcher(r).dispatch("GET", "/hello/ann") == "hi ann"

    @pytest.mark.asyncio
    async def test_async_handler(self) -> None:
        async def handler(id: str) -> str:
            return f"async {id}"

        r = Router()
        r.get("/items/{id}", handler)
        assert await Dispatcher(r).dispatch("GET", "/items/5") == "async 5"

    @pytest.mark.asyncio
    async def test_defaults_passed(self) -> None:
        r = Router()
        r.get("/docs/{page}", lambda page, lang: f"{lang}:{page}", defaults={"lang": "en"})
        assert await Dispatcher(r).dispatch("GET", "/docs/intro") == "en:intro"

    @pytest.mark.asyncio
    async def test_strategy(self) -> None:
        r = Router()
        r.get("/posts/{id}", (BlogPostController, "show"), JsonStrategy)
        result = await Dispatcher(r).dispatch("GET", "/posts/9")
        assert result == {"data": "post 9", "route": "/posts/{id}"}

    @pytest.mark.asyncio
    async def test_async_strategy(self) -> None:
        r = Router()
        r.get("/ping", ping, AsyncStrategy())
        assert await Dispatcher(r).dispatch("GET", "/ping") == "async pong"

    @pytest.mark.asyncio
    async def test_bad_strategy(self) -> None:
        r = Router()
        r.get("/ping", ping, object())
        with pytest.raises(BadStrategyError):
            await Dispatcher(r).dispatch("GET", "/ping")

    @pytest.mark.asyncio
    async def test_not_found_propagates(self) -> None:
        with pytest.raises(NotFound):
            await Dispatcher(Router()).dispatch("GET", "/nothing")

    @pytest.mark.usefixtures("_fake_handlers_module")
    @pytest.mark.asyncio
    async def test_templated_action(self) -> None:
        r = Router()
        r.get(
            "/{kind:slug}/{id:int}",
            "_fake_roost_handlers:{kind}Controller.show",
        )
        assert await Dispatcher(r).dispatch("GET", "/blog-post/4") == "post 4"

    def test_dispatch_sync(self) -> None:
        r = Router()
        r.get("/ping", ping)
        assert Dispatcher(r).dispatch_sync("GET", "/ping") == "pong"

    def test_dispatch_sync_with_async_handler(self) -> None:
        async def handler() -> str:
            return "done"

        r = Router()
        r.post("/jobs", handler)
        assert Dispatcher(r).dispatch_sync("POST", "/jobs") == "done"
