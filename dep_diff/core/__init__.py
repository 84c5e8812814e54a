"""Core resolution and diff logic for DepDiff."""

from .diff import (
    PackageChange,
    PackageChangeType,
    ResolutionDiff,
    VersionChangeType,
    classify_version_change,
    diff_packages,
    diff_resolutions,
)
from .exceptions import (
    DepDiffError,
    LockfileParseError,
    ResolverNotFoundError,
    UnsupportedLockfileError,
)

__all__ = [
    "DepDiffError",
    "LockfileParseError",
    "PackageChange",
    "PackageChangeType",
    "ResolutionDiff",
    "ResolverNotFoundError",
    "UnsupportedLockfileError",
    "VersionChangeType",
    "classify_version_change",
    "diff_packages",
    "diff_resolutions",
]
