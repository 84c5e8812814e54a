"""Python lockfile resolvers.

Four formats are supported: requirements files, Pipfile.lock, poetry.lock
and pdm.lock.  :class:`PythonResolver` looks at the file content rather than
the file name to choose between them.
"""

import re
from typing import Any, Dict, Optional, Tuple

from packaging.requirements import InvalidRequirement, Requirement

from ..exceptions import UnsupportedLockfileError
from .base import BaseResolver, PathLike, Resolution, ResolutionBuilder
from .loaders import load_json, load_toml, try_load_json, try_load_toml

REQUIREMENTS_FILE_PATTERN = re.compile(r"^requirements.*\.(txt|lock)$")
URL_INSTALL_PATTERN = re.compile(r"^(.+?)\s*@\s*(https?|git\+|file\+|file:)")
REQUIREMENT_PATTERN = re.compile(r"^(.+?)\s*(===|==|>=|<=|~=|!=|>|<)\s*(.+)$")
EXTRAS_PATTERN = re.compile(r"\[[^\]]*\]")
INLINE_COMMENT_PATTERN = re.compile(r"\s*#.*$")
VERSION_PATTERN = re.compile(r"(\d+\.\d+\.\d+[^\s,]*)")
LOOSE_VERSION_PATTERN = re.compile(r"(\d+\.\d+(?:\.\d+)?(?:[a-zA-Z0-9.-]*)?)")

REQUIREMENTS = "requirements"
PIPFILE = "pipfile"
POETRY = "poetry"
PDM = "pdm"


def extract_version(spec: str) -> Optional[str]:
    """Return the first version-shaped token of a specifier string.

    Args:
        spec: Text such as ``==1.2.3`` or ``>=1.0.0,<2.0.0``

    Returns:
        ``1.2.3`` style token, or a looser ``1.2`` style one, or None
    """
    match = VERSION_PATTERN.search(spec) or LOOSE_VERSION_PATTERN.search(spec)
    return match.group(1) if match else None


class PythonRequirementsResolver(BaseResolver):
    """Resolver for pip requirements files.

    Requirements files have no dev section, so every pinned line is a
    production dependency.  Lines that carry no version are skipped.
    """

    name = "requirements"
    format_name = "requirements.txt"
    lockfile_names = ("requirements*.txt", "requirements*.lock")

    def can_resolve(self, file_path: PathLike) -> bool:
        """Check if this resolver can handle the file.

        Args:
            file_path: Path to the file

        Returns:
            True if file is named like requirements*.txt or requirements*.lock
        """
        return REQUIREMENTS_FILE_PATTERN.match(self.basename(file_path)) is not None

    def parse_content(self, content: str) -> Resolution:
        """Parse requirements file content.

        Args:
            content: Requirements text

        Returns:
            One production package per versioned requirement line
        """
        builder = ResolutionBuilder()

        for line_num, line in enumerate(content.splitlines(), 1):
            line = line.strip()

            # Skip comments, empty lines and pip options (-r, -e, --index-url, ...)
            if not line or line.startswith("#") or line.startswith("-"):
                continue

            parsed = self._parse_requirement_line(line)
            if parsed is None:
                self.logger.debug(f"Skipping unpinned requirement on line {line_num}: {line}")
                continue

            builder.add(*parsed)

        return builder.build()

    def _parse_requirement_line(self, line: str) -> Optional[Tuple[str, str]]:
        """Parse a single requirement line.

        Args:
            line: Requirement line without leading whitespace

        Returns:
            ``(name, version)`` or None if the line has no usable version
        """
        line = INLINE_COMMENT_PATTERN.sub("", line).strip()
        if not line or URL_INSTALL_PATTERN.match(line):
            return None

        # Environment markers do not change the pinned version
        line = line.split(";", 1)[0].strip()

        try:
            requirement: Optional[Requirement] = Requirement(line)
        except InvalidRequirement:
            requirement = None
        else:
            if requirement.url or not requirement.specifier:
                return None

        match = REQUIREMENT_PATTERN.match(EXTRAS_PATTERN.sub("", line))
        if not match:
            return None

        name = requirement.name if requirement is not None else match.group(1).strip()
        operator, spec = match.group(2), match.group(3).strip()

        if operator in ("==", "==="):
            version: Optional[str] = spec.split(",", 1)[0].split("==", 1)[0].strip()
        else:
            version = extract_version(spec)

        if not name or not version:
            return None
        return name, version


class PipfileResolver(BaseResolver):
    """Resolver for Pipenv Pipfile.lock files."""

    name = "pipfile"
    format_name = "Pipfile.lock"
    lockfile_names = ("Pipfile.lock",)

    def can_resolve(self, file_path: PathLike) -> bool:
        """Check if this resolver can handle the file.

        Args:
            file_path: Path to the file

        Returns:
            True if file is a Pipfile.lock file
        """
        return self.basename(file_path) == "pipfile.lock"

    def parse_content(self, content: str) -> Resolution:
        """Parse Pipfile.lock content.

        Args:
            content: Lockfile JSON text

        Returns:
            ``default`` packages as production, ``develop`` packages as dev
        """
        return self.from_data(load_json(content, self.format_name))

    def from_data(self, data: Dict[str, Any]) -> Resolution:
        builder = ResolutionBuilder()
        self._add_section(builder, data.get("default"), dev=False)
        self._add_section(builder, data.get("develop"), dev=True)
        return builder.build()

    def _add_section(self, builder: ResolutionBuilder, section: Any, dev: bool) -> None:
        if not isinstance(section, dict):
            return

        for name, entry in section.items():
            if not name or not isinstance(entry, dict) or not isinstance(entry.get("version"), str):
                self.logger.debug(f"Skipping Pipfile.lock entry {name!r}")
                continue
            # "==1.2.3"
            version = extract_version(entry["version"])
            if version:
                builder.add(name, version, dev=dev)


class PoetryResolver(BaseResolver):
    """Resolver for Poetry poetry.lock files."""

    name = "poetry"
    format_name = "poetry.lock"
    lockfile_names = ("poetry.lock",)

    def can_resolve(self, file_path: PathLike) -> bool:
        """Check if this resolver can handle the file.

        Args:
            file_path: Path to the file

        Returns:
            True if file is a poetry.lock file
        """
        return self.basename(file_path) == "poetry.lock"

    def parse_content(self, content: str) -> Resolution:
        """Parse poetry.lock content.

        Packages with ``category = "dev"`` are dev dependencies.  Lockfiles
        written by Poetry 1.5 and later drop the category, so all of their
        packages are production.

        Args:
            content: Lockfile TOML text

        Returns:
            Packages of the ``[[package]]`` array
        """
        return self.from_data(load_toml(content, self.format_name))

    def from_data(self, data: Dict[str, Any]) -> Resolution:
        builder = ResolutionBuilder()
        packages = data.get("package")
        if not isinstance(packages, list):
            return builder.build()

        for entry in packages:
            if not isinstance(entry, dict) or not entry.get("name") or "version" not in entry:
                continue
            builder.add(str(entry["name"]), str(entry["version"]), dev=entry.get("category") == "dev")

        return builder.build()


class PdmResolver(BaseResolver):
    """Resolver for PDM pdm.lock files."""

    name = "pdm"
    format_name = "pdm.lock"
    lockfile_names = ("pdm.lock",)

    def can_resolve(self, file_path: PathLike) -> bool:
        """Check if this resolver can handle the file.

        Args:
            file_path: Path to the file

        Returns:
            True if file is a pdm.lock file
        """
        return self.basename(file_path) == "pdm.lock"

    def parse_content(self, content: str) -> Resolution:
        """Parse pdm.lock content.

        Both the JSON rendition and PDM's native TOML lockfile are accepted.

        Args:
            content: Lockfile text

        Returns:
            Packages of the ``package`` list; those in the ``dev`` group or
            flagged ``dev = true`` are dev dependencies
        """
        if content.lstrip().startswith("{"):
            data = load_json(content, self.format_name)
        else:
            data = load_toml(content, self.format_name)
        return self.from_data(data)

    def from_data(self, data: Dict[str, Any]) -> Resolution:
        builder = ResolutionBuilder()
        packages = data.get("package")
        if not isinstance(packages, list):
            return builder.build()

        for entry in packages:
            if not isinstance(entry, dict) or not entry.get("name") or "version" not in entry:
                continue
            groups = entry.get("groups")
            is_dev = (isinstance(groups, list) and "dev" in groups) or entry.get("dev") is True
            builder.add(str(entry["name"]), str(entry["version"]), dev=is_dev)

        return builder.build()


class PythonResolver(BaseResolver):
    """Dispatcher over the Python lockfile formats.

    The file name only decides whether the file is a Python lockfile at
    all; the concrete format is detected from the content.
    """

    name = "python"
    format_name = "Python lockfile"
    lockfile_names = ("requirements*.txt", "Pipfile.lock", "poetry.lock", "pdm.lock")

    def __init__(self) -> None:
        """Initialize the dispatcher and its format resolvers."""
        super().__init__()
        self.requirements = PythonRequirementsResolver()
        self.pipfile = PipfileResolver()
        self.poetry = PoetryResolver()
        self.pdm = PdmResolver()

    def can_resolve(self, file_path: PathLike) -> bool:
        """Check if this resolver can handle the file.

        Args:
            file_path: Path to the file

        Returns:
            True if any of the Python format resolvers accepts the file name
        """
        return any(
            resolver.can_resolve(file_path)
            for resolver in (self.requirements, self.pipfile, self.poetry, self.pdm)
        )

    def parse_content(self, content: str) -> Resolution:
        """Detect the Python lockfile format and parse the content with it.

        Args:
            content: Lockfile text

        Returns:
            Resolution from the matching format resolver

        Raises:
            UnsupportedLockfileError: If the content is JSON or TOML of an
                unknown shape
        """
        json_data = try_load_json(content)
        toml_data = None if json_data else try_load_toml(content)
        file_format = self._detect(json_data, toml_data)
        self.logger.debug(f"Detected {file_format} format")

        if file_format == PIPFILE:
            return self.pipfile.from_data(json_data)
        if file_format == PDM:
            return self.pdm.from_data(json_data or toml_data)
        if file_format == POETRY:
            return self.poetry.from_data(toml_data)
        return self.requirements.parse_content(content)

    def detect_format(self, content: str) -> str:
        """Name the Python lockfile format of the content.

        Args:
            content: Lockfile text

        Returns:
            One of ``pipfile``, ``pdm``, ``poetry`` or ``requirements``

        Raises:
            UnsupportedLockfileError: If the content is JSON or TOML of an
                unknown shape
        """
        json_data = try_load_json(content)
        toml_data = None if json_data else try_load_toml(content)
        return self._detect(json_data, toml_data)

    @staticmethod
    def _detect(json_data: Optional[Dict[str, Any]], toml_data: Optional[Dict[str, Any]]) -> str:
        if json_data:
            if "_meta" in json_data:
                return PIPFILE
            if isinstance(json_data.get("package"), list) or "metadata" in json_data or "content_hash" in json_data:
                return PDM
            raise UnsupportedLockfileError(
                "File is valid JSON but does not match any known Python lockfile format"
            )

        if toml_data:
            if isinstance(toml_data.get("package"), list):
                metadata = toml_data.get("metadata")
                if isinstance(metadata, dict) and ("lock_version" in metadata or "content_hash" in metadata):
                    return PDM
                return POETRY
            raise UnsupportedLockfileError(
                "File is valid TOML but does not match poetry.lock format"
            )

        return REQUIREMENTS
