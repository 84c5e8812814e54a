"""DepDiff - semantic diff of dependency lockfiles across package managers."""

__version__ = "0.1.0"

from .core.diff import (
    PackageChange,
    PackageChangeType,
    ResolutionDiff,
    VersionChangeType,
    diff_resolutions,
)
from .core.resolvers import Package, Resolution, ResolverRegistry, create_default_registry
from .output.formatters import get_formatter

__all__ = [
    "Package",
    "PackageChange",
    "PackageChangeType",
    "Resolution",
    "ResolutionDiff",
    "ResolverRegistry",
    "VersionChangeType",
    "create_default_registry",
    "diff_resolutions",
    "get_formatter",
]
