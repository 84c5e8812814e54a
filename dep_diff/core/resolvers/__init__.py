"""Lockfile resolvers for the supported package managers."""

from .base import BaseResolver, Package, Resolution, ResolutionBuilder
from .nodejs import NpmResolver, PnpmResolver, YarnResolver
from .php import ComposerResolver
from .python import (
    PdmResolver,
    PipfileResolver,
    PoetryResolver,
    PythonRequirementsResolver,
    PythonResolver,
)
from .registry import ResolverPair, ResolverRegistry
from .ruby import RubyGemfileResolver


def create_default_registry() -> ResolverRegistry:
    """Build a registry holding one instance of every built-in resolver.

    Returns:
        Registry with npm, composer, pnpm, yarn, ruby and python resolvers
    """
    registry = ResolverRegistry()
    for resolver in (
        NpmResolver(),
        ComposerResolver(),
        PnpmResolver(),
        YarnResolver(),
        RubyGemfileResolver(),
        PythonResolver(),
    ):
        registry.register(resolver.name, resolver)
    return registry


__all__ = [
    "BaseResolver",
    "ComposerResolver",
    "NpmResolver",
    "Package",
    "PdmResolver",
    "PipfileResolver",
    "PnpmResolver",
    "PoetryResolver",
    "PythonRequirementsResolver",
    "PythonResolver",
    "Resolution",
    "ResolutionBuilder",
    "ResolverPair",
    "ResolverRegistry",
    "RubyGemfileResolver",
    "YarnResolver",
    "create_default_registry",
]
