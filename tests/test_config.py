"""Tests for roost.config — RouterConfig frozen dataclass."""

import pytest

from roost.config import DEFAULT_METHODS, MAX_REGEX_GROUPS, RouterConfig
from roost.errors import ConfigurationError


class TestRouterConfig:
    def test_defaults(self) -> None:
        cfg = RouterConfig()

        assert cfg.methods == DEFAULT_METHODS
        assert cfg.base_path == ""
        assert cfg.wildcards == {}
        assert cfg.chunk_limit == 10
        assert cfg.max_group_count == MAX_REGEX_GROUPS
        assert cfg.cache_groups is True

    def test_frozen(self) -> None:
        cfg = RouterConfig()
        with pytest.raises(AttributeError):
            cfg.chunk_limit = 3  # type: ignore[misc]

    def test_methods_normalized(self) -> None:
        cfg = RouterConfig(methods=("get", " Post ", "GET", ""))
        assert cfg.methods == ("GET", "POST")

    def test_empty_methods(self) -> None:
        with pytest.raises(ConfigurationError):
            RouterConfig(methods=())

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("", ""),
            ("/", ""),
            ("api", "/api"),
            ("/api/", "/api"),
            ("/v1/api", "/v1/api"),
        ],
    )
    def test_base_path_normalized(self, raw: str, expected: str) -> None:
        assert RouterConfig(base_path=raw).base_path == expected

    def test_chunk_limit_positive(self) -> None:
        with pytest.raises(ConfigurationError):
            RouterConfig(chunk_limit=0)

    def test_max_group_count_floor(self) -> None:
        with pytest.raises(ConfigurationError):
            RouterConfig(max_group_count=1)
