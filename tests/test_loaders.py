"""Tests for the shared lockfile loaders and resolver base types."""

import pytest

from dep_diff.core.exceptions import DepDiffError, LockfileParseError
from dep_diff.core.resolvers.base import BaseResolver, Package, ResolutionBuilder
from dep_diff.core.resolvers.loaders import (
    load_json,
    load_toml,
    load_yaml,
    try_load_json,
    try_load_toml,
)


class TestLoaders:
    """Test JSON, TOML and YAML loading."""

    def test_load_json(self):
        """Test loading a JSON object."""
        assert load_json('{"a": 1}', "test.json") == {"a": 1}

    @pytest.mark.parametrize("content", ["[1, 2]", "{broken", '"text"'])
    def test_load_json_errors(self, content):
        """Test that non-object JSON raises a parse error."""
        with pytest.raises(LockfileParseError) as exc_info:
            load_json(content, "test.json")

        assert exc_info.value.format_name == "test.json"
        assert str(exc_info.value).startswith("Failed to parse test.json: ")
        assert isinstance(exc_info.value, DepDiffError)

    def test_parse_error_is_chained(self):
        """Test that the parser exception is kept as the cause."""
        with pytest.raises(LockfileParseError) as exc_info:
            load_toml("a = ", "test.toml")

        assert exc_info.value.__cause__ is not None

    def test_load_yaml(self):
        """Test YAML mappings and empty documents."""
        assert load_yaml("a: 1\n", "test.yaml") == {"a": 1}
        assert load_yaml("", "test.yaml") == {}

    def test_try_loaders(self):
        """Test that the try variants return None instead of raising."""
        assert try_load_json("not json") is None
        assert try_load_json("[]") is None
        assert try_load_toml("requests==2.31.0") is None
        assert try_load_toml('a = "b"') == {"a": "b"}


class TestModels:
    """Test Package and ResolutionBuilder."""

    def test_package_requires_name(self):
        """Test that empty names are rejected."""
        with pytest.raises(ValueError):
            Package(name="", version="1.0.0")

    def test_package_is_immutable(self):
        """Test that packages are frozen."""
        pkg = Package(name="a", version="1.0.0")
        with pytest.raises(AttributeError):
            pkg.version = "2.0.0"

    def test_builder_keeps_first_occurrence(self):
        """Test duplicate handling per group."""
        builder = ResolutionBuilder()
        assert builder.add("a", "1.0.0")
        assert not builder.add("a", "2.0.0")
        assert builder.add("a", "3.0.0", dev=True)

        resolution = builder.build()

        assert resolution.dependencies == [Package("a", "1.0.0")]
        assert resolution.dev_dependencies == [Package("a", "3.0.0")]
        assert "a" in builder

    @pytest.mark.parametrize("path,expected", [
        ("package-lock.json", "package-lock.json"),
        ("/a/b/Gemfile.lock", "gemfile.lock"),
        ("C:\\a\\Yarn.lock", "yarn.lock"),
    ])
    def test_basename(self, path, expected):
        """Test separator-agnostic basename extraction."""
        assert BaseResolver.basename(path) == expected
