"""Ruby Bundler lockfile resolver."""

import re
from typing import Optional

from .base import BaseResolver, PathLike, Resolution, ResolutionBuilder

# "    rails (7.0.4)" or "    nokogiri (1.14.2-x86_64-linux)"
GEM_SPEC_PATTERN = re.compile(r"^(\s+)([^\s(]+)\s+\(([^)]+)\)")


class RubyGemfileResolver(BaseResolver):
    """Resolver for Bundler Gemfile.lock files.

    Gemfile.lock records no dev/production split (that lives in the
    Gemfile), so every gem is reported as a production dependency.
    """

    name = "ruby"
    format_name = "Gemfile.lock"
    lockfile_names = ("Gemfile.lock",)

    def can_resolve(self, file_path: PathLike) -> bool:
        """Check if this resolver can handle the file.

        Args:
            file_path: Path to the file

        Returns:
            True if file is a Gemfile.lock file
        """
        return self.basename(file_path) == "gemfile.lock"

    def parse_content(self, content: str) -> Resolution:
        """Scan the ``GEM`` section's ``specs:`` block.

        Content outside that block is ignored, and content that has no such
        block yields an empty resolution rather than an error.

        Args:
            content: Lockfile text

        Returns:
            Gems pinned in the GEM section
        """
        builder = ResolutionBuilder()
        in_gem_section = False
        in_specs = False
        spec_indent: Optional[int] = None

        for line in content.splitlines():
            stripped = line.strip()

            if not in_gem_section:
                in_gem_section = stripped == "GEM" and not line[:1].isspace()
                continue

            if not stripped:
                continue

            # The next top-level section (PLATFORMS, DEPENDENCIES, ...) ends GEM
            if not line[:1].isspace():
                break

            if stripped == "specs:":
                in_specs = True
                continue
            if not in_specs:
                continue

            match = GEM_SPEC_PATTERN.match(line)
            if not match:
                continue

            indent = len(match.group(1))
            if spec_indent is None:
                spec_indent = indent
            if indent != spec_indent:
                # Deeper lines are the gem's own requirements: "      rack (>= 2.0)"
                continue

            if not builder.add(match.group(2), match.group(3).strip()):
                self.logger.debug(f"Skipping duplicate gem entry {match.group(2)}")

        return builder.build()
