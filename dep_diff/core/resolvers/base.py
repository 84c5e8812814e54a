"""Base resolver class and data models for lockfile resolution."""

import asyncio
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Union

from ...utils.logging import get_logger

PathLike = Union[str, Path]


@dataclass(frozen=True)
class Package:
    """A single resolved package: its name and the literal locked version."""

    name: str
    version: str

    def __post_init__(self) -> None:
        """Validate the package."""
        if not self.name:
            raise ValueError("Package name cannot be empty")


@dataclass(frozen=True)
class Resolution:
    """Top-level packages of one lockfile, split into production and dev."""

    dependencies: List[Package] = field(default_factory=list)
    dev_dependencies: List[Package] = field(default_factory=list)


class ResolutionBuilder:
    """Collects packages while a resolver walks a lockfile.

    The first occurrence of a name in a group wins; later duplicates are
    dropped so that each group of the finished resolution has unique names.
    """

    def __init__(self) -> None:
        self._dependencies: Dict[str, Package] = {}
        self._dev_dependencies: Dict[str, Package] = {}

    def add(self, name: str, version: str, dev: bool = False) -> bool:
        """Add a package to the production or dev group.

        Returns:
            True if the package was added, False if the name was already present
        """
        group = self._dev_dependencies if dev else self._dependencies
        if name in group:
            return False
        group[name] = Package(name=name, version=version)
        return True

    def __contains__(self, name: object) -> bool:
        return name in self._dependencies or name in self._dev_dependencies

    def build(self) -> Resolution:
        return Resolution(
            dependencies=list(self._dependencies.values()),
            dev_dependencies=list(self._dev_dependencies.values()),
        )


class BaseResolver(ABC):
    """Abstract base class for lockfile resolvers."""

    #: Registry name of the resolver (``npm``, ``python``, ...)
    name: str = ""
    #: Format name used in error messages
    format_name: str = ""
    #: Canonical lockfile names, for help output
    lockfile_names: Iterable[str] = ()

    def __init__(self) -> None:
        """Initialize the resolver."""
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def can_resolve(self, file_path: PathLike) -> bool:
        """Check if this resolver handles the given file.

        Only the file name is inspected; the file is never opened.

        Args:
            file_path: Path to the file to check

        Returns:
            True if resolver can handle the file
        """

    @abstractmethod
    def parse_content(self, content: str) -> Resolution:
        """Parse lockfile content into a resolution.

        Args:
            content: Full text of the lockfile

        Returns:
            Resolution with top-level packages
        """

    async def resolve(self, file_path: PathLike) -> Resolution:
        """Read a lockfile and resolve its top-level packages.

        Args:
            file_path: Path to the lockfile

        Returns:
            Resolution extracted from the file

        Raises:
            OSError: If the file cannot be read
            LockfileParseError: If the content is not valid for the format
        """
        content = await self.read_lockfile(file_path)
        resolution = self.parse_content(content)
        self.logger.debug(
            f"{file_path}: {len(resolution.dependencies)} dependencies, "
            f"{len(resolution.dev_dependencies)} dev dependencies"
        )
        return resolution

    async def read_lockfile(self, file_path: PathLike) -> str:
        """Read the lockfile text without blocking the event loop.

        Args:
            file_path: Path to read

        Returns:
            File content decoded as UTF-8, with undecodable bytes replaced
        """
        return await asyncio.to_thread(
            Path(file_path).read_text, encoding="utf-8", errors="replace"
        )

    @staticmethod
    def basename(file_path: PathLike) -> str:
        """Return the lower-cased final path component.

        Both forward and back slashes are treated as separators so that
        Windows-style paths are matched on any platform.
        """
        return re.split(r"[\\/]", str(file_path))[-1].lower()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
