"""PHP Composer lockfile resolver."""

from typing import Any

from .base import BaseResolver, PathLike, Resolution, ResolutionBuilder
from .loaders import load_json


class ComposerResolver(BaseResolver):
    """Resolver for composer.lock files."""

    name = "composer"
    format_name = "composer.lock"
    lockfile_names = ("composer.lock",)

    def can_resolve(self, file_path: PathLike) -> bool:
        """Check if this resolver can handle the file.

        Args:
            file_path: Path to the file

        Returns:
            True if file is a composer.lock file
        """
        return self.basename(file_path) == "composer.lock"

    def parse_content(self, content: str) -> Resolution:
        """Parse composer.lock content.

        ``packages`` holds the production packages and ``packages-dev`` the
        dev ones.  Entries without a name or a version are skipped.

        Args:
            content: Lockfile JSON text

        Returns:
            Packages of both lists
        """
        data = load_json(content, self.format_name)
        builder = ResolutionBuilder()

        self._add_packages(builder, data.get("packages"), dev=False)
        self._add_packages(builder, data.get("packages-dev"), dev=True)

        return builder.build()

    def _add_packages(self, builder: ResolutionBuilder, packages: Any, dev: bool) -> None:
        if not isinstance(packages, list):
            return

        for entry in packages:
            if not isinstance(entry, dict):
                continue
            name = entry.get("name")
            version = entry.get("version")
            if not isinstance(name, str) or not name or not isinstance(version, str):
                self.logger.debug(f"Skipping composer entry without name or version: {entry!r}")
                continue
            builder.add(name, version, dev=dev)
