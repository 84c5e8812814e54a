"""Shared fixtures for the DepDiff test suite."""

import json
from pathlib import Path
from typing import Any, Callable, Optional

import pytest


@pytest.fixture
def write_lockfile(tmp_path: Path) -> Callable[..., Path]:
    """Write a lockfile into tmp_path and return its path.

    Dicts and lists are serialized as JSON; strings are written as-is.
    """

    def _write(name: str, content: Any, subdir: Optional[str] = None) -> Path:
        directory = tmp_path / subdir if subdir else tmp_path
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        if not isinstance(content, str):
            content = json.dumps(content, indent=2)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def npm_lockfile() -> Callable[..., dict]:
    """Builder for lockfileVersion 1 package-lock.json documents."""
    return build_npm_v1_lockfile


def build_npm_v1_lockfile(dependencies: dict, dev: Optional[dict] = None) -> dict:
    """Build a lockfileVersion 1 package-lock.json document.

    Args:
        dependencies: Mapping of name to version for production packages
        dev: Mapping of name to version for packages flagged ``dev``
    """
    entries = {name: {"version": version} for name, version in dependencies.items()}
    for name, version in (dev or {}).items():
        entries[name] = {"version": version, "dev": True}
    return {"name": "app", "version": "1.0.0", "lockfileVersion": 1, "dependencies": entries}
