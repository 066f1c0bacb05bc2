# domain/ports/package_resolver_port.py
"""
Domain-layer interface for the content-addressed package store.

The dependency walk only needs one thing from the store: turn a package
hash into that package's manifest. Fetching, caching and storage layout
stay behind this port.
"""

from __future__ import annotations

import typing as _t
from typing import Protocol, runtime_checkable

if _t.TYPE_CHECKING:  # pragma: no cover
    from domain.manifest.package import Manifest


@runtime_checkable
class PackageResolverPort(Protocol):
    """
    Maps a package hash to its loaded manifest.

    ``language`` is a namespace hint taken from the depending manifest.
    Implementations signal a missing package by raising
    ``ManifestNotFoundError`` (or ``FileNotFoundError``); any other
    exception is treated as a resolver failure.
    """

    def load_package(self, language: str, pkg_hash: str) -> "Manifest":
        ...
