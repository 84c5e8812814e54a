"""Semantic diff of two lockfile resolutions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import semantic_version

from .resolvers.base import Package, Resolution


class PackageChangeType(str, Enum):
    """Kind of change to a package between two resolutions."""

    ADDED = "added"
    REMOVED = "removed"
    UPGRADED = "upgraded"
    DOWNGRADED = "downgraded"


class VersionChangeType(str, Enum):
    """SemVer component that changed in an upgrade or downgrade."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


@dataclass(frozen=True)
class PackageChange:
    """A single package change.

    ``version_change``, ``from_version`` and ``to_version`` are all set for
    upgrades and downgrades.  Added packages carry only ``to_version`` and
    removed packages only ``from_version``.
    """

    name: str
    type: PackageChangeType
    version_change: Optional[VersionChangeType] = None
    from_version: Optional[str] = None
    to_version: Optional[str] = None


@dataclass(frozen=True)
class ResolutionDiff:
    """Changes between two resolutions, split into production and dev."""

    dependencies: List[PackageChange] = field(default_factory=list)
    dev_dependencies: List[PackageChange] = field(default_factory=list)

    def is_empty(self) -> bool:
        """Check whether neither group has any change."""
        return not self.dependencies and not self.dev_dependencies


def diff_resolutions(source: Resolution, target: Resolution) -> ResolutionDiff:
    """Compare two resolutions group by group.

    Production and dev packages are compared independently; a package moving
    from one group to the other shows up as removed from one and added to the
    other.

    Args:
        source: Older snapshot
        target: Newer snapshot

    Returns:
        Changes from source to target
    """
    return ResolutionDiff(
        dependencies=diff_packages(source.dependencies, target.dependencies),
        dev_dependencies=diff_packages(source.dev_dependencies, target.dev_dependencies),
    )


def diff_packages(source: Sequence[Package], target: Sequence[Package]) -> List[PackageChange]:
    """Compare two package lists by name.

    Removed, upgraded and downgraded packages are listed first, in source
    order, followed by added packages in target order.  Packages whose
    version changed in a way :func:`classify_version_change` cannot rank
    are left out.

    Args:
        source: Packages of the older snapshot
        target: Packages of the newer snapshot

    Returns:
        List of package changes
    """
    # Later duplicates overwrite earlier ones
    source_map: Dict[str, Package] = {pkg.name: pkg for pkg in source}
    target_map: Dict[str, Package] = {pkg.name: pkg for pkg in target}

    changes: List[PackageChange] = []

    for name, source_pkg in source_map.items():
        target_pkg = target_map.get(name)
        if target_pkg is None:
            changes.append(PackageChange(
                name=name,
                type=PackageChangeType.REMOVED,
                from_version=source_pkg.version,
            ))
            continue

        if source_pkg.version == target_pkg.version:
            continue

        classified = classify_version_change(source_pkg.version, target_pkg.version)
        if classified is None:
            continue

        change_type, version_change = classified
        changes.append(PackageChange(
            name=name,
            type=change_type,
            version_change=version_change,
            from_version=source_pkg.version,
            to_version=target_pkg.version,
        ))

    for name, target_pkg in target_map.items():
        if name not in source_map:
            changes.append(PackageChange(
                name=name,
                type=PackageChangeType.ADDED,
                to_version=target_pkg.version,
            ))

    return changes


def classify_version_change(
    from_version: str,
    to_version: str
) -> Optional[Tuple[PackageChangeType, VersionChangeType]]:
    """Classify a version transition.

    The first of major, minor and patch that differs picks the bucket.  When
    those are equal, a prerelease difference counts as a patch change and a
    build metadata difference is no change at all.

    Args:
        from_version: Version in the older snapshot
        to_version: Version in the newer snapshot

    Returns:
        ``(UPGRADED or DOWNGRADED, bucket)``, or None if either version is not
        valid SemVer or the two are equivalent
    """
    old = parse_semver(from_version)
    new = parse_semver(to_version)
    if old is None or new is None:
        return None

    if old.major != new.major:
        bucket = VersionChangeType.MAJOR
    elif old.minor != new.minor:
        bucket = VersionChangeType.MINOR
    elif old.patch != new.patch or old.prerelease != new.prerelease:
        bucket = VersionChangeType.PATCH
    else:
        return None

    direction = PackageChangeType.UPGRADED if new > old else PackageChangeType.DOWNGRADED
    return direction, bucket


def parse_semver(version: str) -> Optional[semantic_version.Version]:
    """Parse a strict SemVer 2.0.0 string.

    Surrounding whitespace and a single leading ``v`` are tolerated.

    Returns:
        Parsed version, or None if the string is not valid SemVer
    """
    text = version.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    try:
        return semantic_version.Version(text)
    except ValueError:
        return None
