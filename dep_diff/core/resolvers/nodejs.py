"""Node.js lockfile resolvers (npm, pnpm, Yarn)."""

import re
from typing import Any, Dict, Optional, Tuple

from yarnlock import yarnlock_parse

from ..exceptions import LockfileParseError, UnsupportedLockfileError
from .base import BaseResolver, PathLike, Resolution, ResolutionBuilder
from .loaders import load_json, load_yaml

NODE_MODULES = "node_modules"
CONFLICT_MARKERS = ("<<<<<<<", "=======", ">>>>>>>")


def install_parent(key: str) -> Optional[str]:
    """Return the path in front of a key's ``node_modules`` segment.

    ``apps/web/node_modules/lodash`` gives ``apps/web``;
    ``node_modules/lodash`` and keys without ``node_modules`` give None.
    """
    parts = key.lstrip("/").split("/")
    if NODE_MODULES not in parts:
        return None
    index = parts.index(NODE_MODULES)
    return "/".join(parts[:index]) or None


class NpmResolver(BaseResolver):
    """Resolver for npm package-lock.json files (lockfileVersion 1, 2 and 3)."""

    name = "npm"
    format_name = "package-lock.json"
    lockfile_names = ("package-lock.json",)

    def can_resolve(self, file_path: PathLike) -> bool:
        """Check if this resolver can handle the file.

        Args:
            file_path: Path to the file

        Returns:
            True if file is a package-lock.json file
        """
        return self.basename(file_path) == "package-lock.json"

    def parse_content(self, content: str) -> Resolution:
        """Parse package-lock.json content.

        Args:
            content: Lockfile JSON text

        Returns:
            Top-level packages of the lockfile
        """
        data = load_json(content, self.format_name)
        lockfile_version = data.get("lockfileVersion", 1)

        if lockfile_version == 1:
            return self._resolve_v1(data)
        if lockfile_version in (2, 3):
            return self._resolve_v2(data)

        raise UnsupportedLockfileError(
            f"Unsupported lockfileVersion: {lockfile_version}. "
            "Only versions 1, 2, and 3 are supported.",
            format_name=self.format_name,
        )

    def _resolve_v1(self, data: Dict[str, Any]) -> Resolution:
        """Read the root-level entries of the v1 dependency trees.

        Nested ``dependencies`` inside an entry are transitive and are not
        visited.
        """
        builder = ResolutionBuilder()
        self._add_tree_roots(builder, data.get("dependencies"), force_dev=False)
        self._add_tree_roots(builder, data.get("devDependencies"), force_dev=True)
        return builder.build()

    def _resolve_v2(self, data: Dict[str, Any]) -> Resolution:
        """Read the flat ``packages`` map, then the legacy ``dependencies`` tree."""
        builder = ResolutionBuilder()

        packages = data.get("packages")
        if isinstance(packages, dict):
            candidates = []
            for key, entry in packages.items():
                if not isinstance(entry, dict) or not isinstance(entry.get("version"), str):
                    continue
                name = self.package_name_from_path(key)
                if name is not None:
                    candidates.append((key, name, entry))

            root_names = {name for key, name, _ in candidates if install_parent(key) is None}
            for key, name, entry in candidates:
                # express/node_modules/debug sits inside the express install
                if install_parent(key) in root_names:
                    continue
                builder.add(name, entry["version"], dev=entry.get("dev") is True)

        # v2 lockfiles repeat the tree in the v1 shape for older npm clients
        self._add_tree_roots(builder, data.get("dependencies"), force_dev=False)
        return builder.build()

    def _add_tree_roots(
        self,
        builder: ResolutionBuilder,
        tree: Any,
        force_dev: bool
    ) -> None:
        if not isinstance(tree, dict):
            return

        for name, entry in tree.items():
            if not name or not isinstance(entry, dict):
                continue
            version = entry.get("version")
            if not isinstance(version, str):
                continue
            if name in builder:
                continue
            builder.add(name, version, dev=force_dev or entry.get("dev") is True)

    @staticmethod
    def package_name_from_path(key: str) -> Optional[str]:
        """Extract the package name from a ``packages`` map key.

        ``node_modules/express`` and ``apps/web/node_modules/@scope/pkg`` are
        top-level installs.  Keys with several ``node_modules`` segments are
        nested installs, and keys with none (``""`` or a workspace folder) are
        the project itself.

        Args:
            key: Path key from the ``packages`` map

        Returns:
            Package name, or None if the key is not a top-level install
        """
        parts = key.split("/")
        if parts.count(NODE_MODULES) != 1:
            return None
        name = "/".join(parts[parts.index(NODE_MODULES) + 1:])
        return name or None


class PnpmResolver(BaseResolver):
    """Resolver for pnpm-lock.yaml files."""

    name = "pnpm"
    format_name = "pnpm-lock.yaml"
    lockfile_names = ("pnpm-lock.yaml",)

    _PEER_SUFFIX = re.compile(r"[(_].*$")
    _SCOPED_NAME = re.compile(r"^@[^/]+/[^/]+$")

    def can_resolve(self, file_path: PathLike) -> bool:
        """Check if this resolver can handle the file.

        Args:
            file_path: Path to the file

        Returns:
            True if file is a pnpm-lock.yaml file
        """
        return self.basename(file_path) == "pnpm-lock.yaml"

    def parse_content(self, content: str) -> Resolution:
        """Parse pnpm-lock.yaml content.

        Args:
            content: Lockfile YAML text

        Returns:
            Packages of the lockfile's ``packages`` map
        """
        data = load_yaml(content, self.format_name)
        builder = ResolutionBuilder()

        packages = data.get("packages")
        if not isinstance(packages, dict):
            return builder.build()

        candidates = []
        for key, entry in packages.items():
            if not isinstance(key, str) or not isinstance(entry, dict):
                continue
            info = self.extract_package_info(key)
            if info is None:
                self.logger.debug(f"Skipping nested pnpm entry {key}")
                continue
            candidates.append((key, entry, info))

        root_names = {info[0] for key, _, info in candidates if install_parent(key) is None}

        for key, entry, (name, key_version) in candidates:
            parent = install_parent(key)
            if parent is not None:
                parent_info = self.extract_package_info(parent)
                if parent_info is not None and parent_info[0] in root_names:
                    self.logger.debug(f"Skipping {key}: installed inside {parent_info[0]}")
                    continue

            # The entry's own version field wins over the one in the key
            entry_version = entry.get("version")
            version = entry_version if isinstance(entry_version, str) else key_version
            if not version:
                continue

            builder.add(name, version, dev=entry.get("dev") is True)

        return builder.build()

    def extract_package_info(self, key: str) -> Optional[Tuple[str, Optional[str]]]:
        """Split a ``packages`` key into name and key version.

        Args:
            key: Key such as ``/express@4.18.0``, ``@scope/pkg@1.0.0``,
                ``node_modules/lodash`` or ``/express/4.18.0`` (pnpm v5)

        Returns:
            ``(name, version)`` where version may be None, or None for keys
            that are provably nested
        """
        # Peer groups may hold slashes of their own: /a@1.0.0(@types/b@2.0.0)
        key = key.split("(", 1)[0]
        legacy = key.startswith("/")
        package_key = self._clean_package_key(key.lstrip("/") if legacy else key, legacy)
        if package_key is None:
            return None

        if package_key.startswith("@"):
            at_index = package_key.rfind("@")
            if at_index <= 0:
                return package_key, None
            name, version = package_key[:at_index], package_key[at_index + 1:]
        elif "@" in package_key:
            name, version = package_key.split("@", 1)
        else:
            return package_key, None

        return name, self._strip_peer_suffix(version)

    def _clean_package_key(self, key: str, legacy: bool) -> Optional[str]:
        parts = key.split("/")

        if NODE_MODULES in parts:
            if parts.count(NODE_MODULES) != 1:
                return None
            # One node_modules segment: a workspace install (apps/web/node_modules/x)
            # or a nested one (express/node_modules/x). parse_content only drops
            # the latter when the parent is itself a package in the lockfile.
            return "/".join(parts[parts.index(NODE_MODULES) + 1:]) or None

        if len(parts) == 1 or self._SCOPED_NAME.match(key):
            return key

        if legacy and parts[-1][:1].isdigit():
            # pnpm v5 key: /name/1.0.0 or /@scope/name/1.0.0_react@17.0.2
            name_parts = parts[:-1]
            version = parts[-1].split("_", 1)[0]
            if len(name_parts) == 1 or (len(name_parts) == 2 and name_parts[0].startswith("@")):
                return f"{'/'.join(name_parts)}@{version}"

        return None

    def _strip_peer_suffix(self, version: str) -> Optional[str]:
        version = self._PEER_SUFFIX.sub("", version)
        return version or None


class YarnResolver(BaseResolver):
    """Resolver for yarn.lock files (classic v1 syntax and Berry YAML)."""

    name = "yarn"
    format_name = "yarn.lock"
    lockfile_names = ("yarn.lock",)

    _VERSION_TOKEN = re.compile(r"(\d+\.\d+\.\d+\S*)")
    _LEADING_OPERATORS = re.compile(r"^[\s^~<>=v]+")

    def can_resolve(self, file_path: PathLike) -> bool:
        """Check if this resolver can handle the file.

        Args:
            file_path: Path to the file

        Returns:
            True if file is a yarn.lock file
        """
        return self.basename(file_path) == "yarn.lock"

    def parse_content(self, content: str) -> Resolution:
        """Parse yarn.lock content.

        yarn.lock has no dev marker of its own, so entries are production
        unless they carry ``devDependency: true``.

        Args:
            content: Lockfile text

        Returns:
            One package per name found in the lockfile
        """
        entries = self._load_entries(content)
        builder = ResolutionBuilder()

        for key, entry in entries.items():
            if key == "__metadata" or not isinstance(entry, dict):
                continue

            # Berry joins selectors in a single key: "a@npm:^1.0.0, a@npm:^1.1.0"
            selector = key.split(",")[0].strip()
            name, range_part = self.split_selector(selector)
            if not name:
                continue

            version = entry.get("version")
            if not isinstance(version, str) or not version:
                version = self.version_from_range(range_part)
            if not version:
                continue

            builder.add(name, version, dev=entry.get("devDependency") is True)

        return builder.build()

    def _load_entries(self, content: str) -> Dict[str, Any]:
        if re.search(r"^__metadata:", content, re.MULTILINE):
            return load_yaml(content, self.format_name)

        for line_number, line in enumerate(content.splitlines(), 1):
            if line.startswith(CONFLICT_MARKERS):
                raise LockfileParseError(
                    self.format_name,
                    f"Unresolved merge conflict marker (line {line_number})"
                )

        try:
            entries = yarnlock_parse(content)
        except Exception as e:  # yarnlock raises plain built-in errors on bad syntax
            raise LockfileParseError(self.format_name, str(e) or type(e).__name__) from e

        if not isinstance(entries, dict):
            raise LockfileParseError(self.format_name, "Expected a mapping of entries")
        return entries

    @staticmethod
    def split_selector(selector: str) -> Tuple[str, str]:
        """Split ``name@range`` into name and range.

        The separator is the first ``@`` after an optional leading scope
        ``@``, so aliases such as ``alias@npm:real@^1.0.0`` keep their alias
        name.

        Returns:
            ``(name, range)``; range is empty when the selector has no ``@``
        """
        at_index = selector.find("@", 1)
        if at_index == -1:
            return selector, ""
        return selector[:at_index].strip(), selector[at_index + 1:].strip()

    def version_from_range(self, range_part: str) -> Optional[str]:
        """Best-effort version from a selector range such as ``npm:^1.2.3``."""
        if not range_part:
            return None

        # Drop protocol prefixes like npm: or workspace:
        version = range_part.split(":", 1)[1] if ":" in range_part else range_part

        match = self._VERSION_TOKEN.search(version)
        if match:
            return match.group(1)

        version = self._LEADING_OPERATORS.sub("", version).strip()
        return version or None
