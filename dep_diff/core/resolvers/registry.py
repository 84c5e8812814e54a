"""Registry mapping resolver names and file names to resolvers."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..exceptions import ResolverNotFoundError
from .base import BaseResolver, PathLike


@dataclass(frozen=True)
class ResolverPair:
    """Resolvers chosen for the source and target files of a diff."""

    source: BaseResolver
    target: BaseResolver


class ResolverRegistry:
    """Registry of lockfile resolvers, looked up by name or by file."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._resolvers: Dict[str, BaseResolver] = {}

    def register(self, name: str, resolver: BaseResolver) -> None:
        """Register a resolver under a name.

        Registration order is the order in which resolvers are tried when
        matching files.

        Args:
            name: Resolver name (e.g., 'npm', 'python')
            resolver: Resolver instance to register
        """
        self._resolvers[name.lower()] = resolver

    def get_resolver(self, name: str) -> BaseResolver:
        """Get a resolver by name.

        Args:
            name: Resolver name, matched case-insensitively

        Returns:
            Registered resolver instance

        Raises:
            ResolverNotFoundError: If no resolver has that name
        """
        resolver = self._resolvers.get(name.lower())
        if resolver is None:
            available = ", ".join(self._resolvers)
            raise ResolverNotFoundError(f"Unknown resolver: {name}. Available: {available}")
        return resolver

    def find_resolver_for_file(self, file_path: PathLike) -> Optional[BaseResolver]:
        """Find a resolver that can handle the given file.

        Args:
            file_path: Path to the file

        Returns:
            First registered resolver accepting the file name, or None
        """
        for resolver in self._resolvers.values():
            if resolver.can_resolve(file_path):
                return resolver
        return None

    def get_supported_resolvers(self) -> List[str]:
        """Get list of registered resolver names.

        Returns:
            Resolver names in registration order
        """
        return list(self._resolvers)

    def lookup_resolvers(
        self,
        source: PathLike,
        target: PathLike,
        resolver_name: Optional[str] = None
    ) -> ResolverPair:
        """Choose the resolver used to read both files of a diff.

        An explicit name wins.  Otherwise the resolver matching the source
        file is used, falling back to the one matching the target file.
        Either way both files are read by the same resolver.

        Args:
            source: Path of the older lockfile
            target: Path of the newer lockfile
            resolver_name: Optional resolver name

        Returns:
            Pair holding the same resolver twice

        Raises:
            ResolverNotFoundError: If the name is unknown or neither file
                matches a resolver
        """
        if resolver_name:
            resolver = self.get_resolver(resolver_name)
            return ResolverPair(source=resolver, target=resolver)

        resolver = self.find_resolver_for_file(source) or self.find_resolver_for_file(target)
        if resolver is None:
            raise ResolverNotFoundError(
                f"No resolver found for source or target files. Source: {source}, Target: {target}"
            )
        return ResolverPair(source=resolver, target=resolver)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._resolvers

    def __len__(self) -> int:
        return len(self._resolvers)
