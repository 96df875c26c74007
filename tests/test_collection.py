"""Tests for roost.routing.collection — static map, dynamic buckets, names."""

import dataclasses

import pytest

from roost.config import RouterConfig
from roost.errors import BadRouteError, BadRouteKind, MethodNotSupported
from roost.routing.collection import RouteCollection
from roost.routing.route import Route


def _handler() -> str:
    return "ok"


class TestInsert:
    def test_static_route(self) -> None:
        store = RouteCollection()
        (route,) = store.insert("GET", "/users", _handler)
        assert store.find_static("GET", "/users") is route

    def test_dynamic_route(self) -> None:
        store = RouteCollection()
        (route,) = store.insert("GET", "/users/{id}", _handler)
        assert store.find_static("GET", "/users/{id}") is None
        bucket = store.find_dynamic_bucket("GET", 2)
        assert bucket is not None
        assert list(bucket.routes.values()) == [route]

    def test_method_is_normalized(self) -> None:
        store = RouteCollection()
        (route,) = store.insert("get", "/users", _handler)
        assert route.method == "GET"

    def test_unsupported_method(self) -> None:
        store = RouteCollection()
        with pytest.raises(MethodNotSupported) as exc_info:
            store.insert("BREW", "/coffee", _handler)
        assert exc_info.value.method == "BREW"

    def test_extended_methods(self) -> None:
        store = RouteCollection(RouterConfig(methods=("GET", "HEAD")))
        (route,) = store.insert("HEAD", "/", _handler)
        assert route.method == "HEAD"

    def test_optional_segments_split_static_and_dynamic(self) -> None:
        store = RouteCollection()
        routes = store.insert("GET", "/users[/{page:int}]", _handler)
        assert [r.pattern for r in routes] == ["/users", r"/users/{page:\d+}"]
        assert store.find_static("GET", "/users") is routes[0]
        bucket = store.find_dynamic_bucket("GET", 2)
        assert bucket is not None
        assert routes[1] in bucket.routes.values()

    def test_options_are_stored(self) -> None:
        store = RouteCollection()
        (route,) = store.insert(
            "GET", "/", _handler, "strategy", name="home", defaults={"a": 1}, metadata={"b": 2}
        )
        assert route.strategy == "strategy"
        assert route.name == "home"
        assert route.defaults == {"a": 1}
        assert route.metadata == {"b": 2}

    def test_reinsert_overwrites(self) -> None:
        store = RouteCollection()
        store.insert("GET", "/users/{id}", "first")
        (second,) = store.insert("GET", "/users/{id}", "second")
        bucket = store.find_dynamic_bucket("GET", 2)
        assert bucket is not None
        assert list(bucket.routes.values()) == [second]
        assert len(store) == 1

    def test_too_many_placeholders(self) -> None:
        store = RouteCollection(RouterConfig(max_group_count=3))
        with pytest.raises(BadRouteError) as exc_info:
            store.insert("GET", "/{a}/{b}/{c}", _handler)
        assert exc_info.value.kind is BadRouteKind.TOO_MANY_PLACEHOLDERS


class TestBuckets:
    def test_keyed_by_method_and_shape(self) -> None:
        store = RouteCollection()
        store.insert("GET", "/a/{x}", _handler)
        store.insert("POST", "/a/{x}", _handler)
        store.insert("GET", "/a/{x}/{y}", _handler)

        get_two = store.find_dynamic_bucket("GET", 2)
        post_two = store.find_dynamic_bucket("POST", 2)
        get_three = store.find_dynamic_bucket("GET", 3)
        assert get_two is not None and get_two.key == ("GET", 2)
        assert post_two is not None and post_two.key == ("POST", 2)
        assert get_three is not None and get_three.key == ("GET", 3)
        assert get_two is not post_two

    def test_missing_bucket(self) -> None:
        assert RouteCollection().find_dynamic_bucket("GET", 5) is None

    def test_version_changes_on_insert_and_remove(self) -> None:
        store = RouteCollection()
        store.insert("GET", "/a/{x}", _handler)
        bucket = store.find_dynamic_bucket("GET", 2)
        assert bucket is not None
        first = bucket.version
        store.insert("GET", "/b/{x}", _handler)
        second = bucket.version
        store.remove("GET", "/a/{x}")
        assert first < second < bucket.version

    def test_emptied_bucket_is_not_returned(self) -> None:
        store = RouteCollection()
        store.insert("GET", "/a/{x}", _handler)
        store.remove("GET", "/a/{x}")
        assert store.find_dynamic_bucket("GET", 2) is None

    def test_registration_order_kept(self) -> None:
        store = RouteCollection()
        store.insert("GET", "/a/{x}", "a")
        store.insert("GET", "/b/{x}", "b")
        store.insert("GET", "/c/{x}", "c")
        bucket = store.find_dynamic_bucket("GET", 2)
        assert bucket is not None
        assert [r.action for r in bucket.routes.values()] == ["a", "b", "c"]


class TestRemove:
    def test_remove_static(self) -> None:
        store = RouteCollection()
        store.insert("GET", "/users", _handler)
        removed = store.remove("GET", "/users")
        assert len(removed) == 1
        assert store.find_static("GET", "/users") is None

    def test_remove_is_idempotent(self) -> None:
        store = RouteCollection()
        store.insert("GET", "/users/{id}", _handler)
        assert len(store.remove("GET", "/users/{id}")) == 1
        assert store.remove("GET", "/users/{id}") == []

    def test_remove_raw_pattern_with_optional_and_wildcards(self) -> None:
        store = RouteCollection()
        store.insert("GET", "/posts[/{page:int}]", _handler)
        removed = store.remove("GET", "/posts[/{page:int}]")
        assert len(removed) == 2
        assert len(store) == 0

    def test_remove_only_that_method(self) -> None:
        store = RouteCollection()
        store.insert("GET", "/users", _handler)
        store.insert("POST", "/users", _handler)
        store.remove("POST", "/users")
        assert store.find_static("GET", "/users") is not None
        assert store.find_static("POST", "/users") is None

    def test_remove_malformed_pattern_is_noop(self) -> None:
        store = RouteCollection()
        assert store.remove("GET", "/users/{id") == []

    def test_remove_drops_name(self) -> None:
        store = RouteCollection()
        store.insert("GET", "/users", _handler, name="users")
        store.remove("GET", "/users")
        assert store.find_named("users") == []


class TestReplace:
    def test_replace_pattern(self) -> None:
        store = RouteCollection()
        (old,) = store.insert("GET", "/users/{id}", _handler)
        new = store.replace(old, dataclasses.replace(old, pattern="/people/{id}"))
        assert old not in store
        assert new in store
        bucket = store.find_dynamic_bucket("GET", 2)
        assert bucket is not None
        assert list(bucket.routes) == ["/people/{id}"]

    def test_replace_method(self) -> None:
        store = RouteCollection()
        (old,) = store.insert("GET", "/users", _handler)
        store.replace(old, dataclasses.replace(old, method="POST"))
        assert store.find_static("GET", "/users") is None
        assert store.find_static("POST", "/users") is not None

    def test_rejected_replacement_keeps_old(self) -> None:
        store = RouteCollection(RouterConfig(max_group_count=2))
        (old,) = store.insert("GET", "/users/{id}", _handler)
        with pytest.raises(BadRouteError):
            store.replace(old, dataclasses.replace(old, pattern="/users/{id}/{tab}"))
        assert old in store

    def test_replace_stale_route(self) -> None:
        store = RouteCollection()
        (old,) = store.insert("GET", "/users", "first")
        store.insert("GET", "/users", "second")
        with pytest.raises(LookupError):
            store.replace(old, dataclasses.replace(old, action="third"))

    def test_replace_with_unsupported_method(self) -> None:
        store = RouteCollection()
        (old,) = store.insert("GET", "/users", _handler)
        with pytest.raises(MethodNotSupported):
            store.replace(old, Route("BREW", "/users", _handler))
        assert old in store


class TestNamedAndIteration:
    def test_named_variants(self) -> None:
        store = RouteCollection()
        routes = store.insert("GET", "/posts[/{page}]", _handler, name="posts")
        assert store.find_named("posts") == routes

    def test_routes_and_len(self) -> None:
        store = RouteCollection()
        store.insert("GET", "/", _handler)
        store.insert("GET", "/users/{id}", _handler)
        store.insert("DELETE", "/users/{id}", _handler)
        assert len(store) == 3
        assert [r.pattern for r in store.routes] == ["/", "/users/{id}", "/users/{id}"]
        assert list(store) == store.routes

    def test_contains_requires_identity(self) -> None:
        store = RouteCollection()
        (route,) = store.insert("GET", "/", _handler)
        assert route in store
        assert Route("GET", "/", _handler) not in store
        assert "GET /" not in store
