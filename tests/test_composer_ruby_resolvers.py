"""Tests for the Composer and Bundler resolvers."""

import json
import textwrap

import pytest

from dep_diff.core.exceptions import LockfileParseError
from dep_diff.core.resolvers.php import ComposerResolver
from dep_diff.core.resolvers.ruby import RubyGemfileResolver

GEMFILE_LOCK = textwrap.dedent("""\
    GIT
      remote: https://github.com/example/mygem.git
      revision: 0123abc
      specs:
        mygem (0.1.0)

    GEM
      remote: https://rubygems.org/
      specs:
        actionpack (7.0.4)
          actionview (= 7.0.4)
          rack (~> 2.0, >= 2.2.0)
        nokogiri (1.14.2-x86_64-linux)
          racc (~> 1.4)
        nokogiri (1.14.2-arm64-darwin)
          racc (~> 1.4)
        rack (2.2.6)

    PLATFORMS
      x86_64-linux

    DEPENDENCIES
      actionpack (~> 7.0)
      nokogiri

    BUNDLED WITH
       2.4.6
    """)


def versions(packages):
    return {pkg.name: pkg.version for pkg in packages}


class TestComposerResolver:
    """Test composer.lock resolution."""

    def test_can_resolve(self):
        """Test file name matching."""
        resolver = ComposerResolver()
        assert resolver.can_resolve("app/composer.lock")
        assert resolver.can_resolve("Composer.lock")
        assert not resolver.can_resolve("composer.json")

    def test_parse(self):
        """Test packages and packages-dev."""
        content = json.dumps({
            "content-hash": "abc",
            "packages": [
                {"name": "symfony/console", "version": "v6.3.0"},
                {"name": "monolog/monolog", "version": "3.4.0"},
                {"name": "broken/entry"},
            ],
            "packages-dev": [
                {"name": "phpunit/phpunit", "version": "10.2.1"},
            ],
        })

        result = ComposerResolver().parse_content(content)

        assert versions(result.dependencies) == {
            "symfony/console": "v6.3.0",
            "monolog/monolog": "3.4.0",
        }
        assert versions(result.dev_dependencies) == {"phpunit/phpunit": "10.2.1"}

    def test_missing_sections(self):
        """Test that a lockfile without package lists is empty."""
        result = ComposerResolver().parse_content('{"content-hash": "abc"}')
        assert result.dependencies == [] and result.dev_dependencies == []

    def test_invalid_json(self):
        """Test that errors name composer.lock."""
        with pytest.raises(LockfileParseError, match="Failed to parse composer.lock"):
            ComposerResolver().parse_content("{\"packages\": [")


class TestRubyGemfileResolver:
    """Test Gemfile.lock resolution."""

    def test_can_resolve(self):
        """Test case-insensitive file name matching."""
        resolver = RubyGemfileResolver()
        assert resolver.can_resolve("Gemfile.lock")
        assert resolver.can_resolve("/srv/app/gemfile.lock")
        assert not resolver.can_resolve("Gemfile")

    def test_parse(self):
        """Test that only top-level GEM specs are read."""
        result = RubyGemfileResolver().parse_content(GEMFILE_LOCK)

        assert [pkg.name for pkg in result.dependencies] == ["actionpack", "nokogiri", "rack"]
        assert versions(result.dependencies) == {
            "actionpack": "7.0.4",
            "nokogiri": "1.14.2-x86_64-linux",
            "rack": "2.2.6",
        }
        assert result.dev_dependencies == []

    @pytest.mark.parametrize("content", [
        "",
        "this is not a lockfile {{{ ]]",
        "GEM\n",
        "GEM\n  remote: https://rubygems.org/\n",
    ])
    def test_garbage_yields_empty_resolution(self, content):
        """Test that unparseable content never raises."""
        result = RubyGemfileResolver().parse_content(content)
        assert result.dependencies == [] and result.dev_dependencies == []

    @pytest.mark.asyncio
    async def test_resolve(self, write_lockfile):
        """Test resolving a Gemfile.lock from disk."""
        path = write_lockfile("Gemfile.lock", GEMFILE_LOCK)

        result = await RubyGemfileResolver().resolve(path)

        assert "rack" in [pkg.name for pkg in result.dependencies]

    @pytest.mark.asyncio
    async def test_resolve_non_utf8_bytes(self, tmp_path):
        """Test that undecodable bytes do not stop the scan."""
        path = tmp_path / "Gemfile.lock"
        path.write_bytes(b"GEM\n  specs:\n    caf\xe9 (1.0.0)\n    rack (2.2.6)\n\nPLATFORMS\n  ruby\n")

        result = await RubyGemfileResolver().resolve(path)

        assert [(pkg.name, pkg.version) for pkg in result.dependencies] == [
            ("caf�", "1.0.0"),
            ("rack", "2.2.6"),
        ]
