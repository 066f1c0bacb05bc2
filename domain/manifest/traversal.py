# domain/manifest/traversal.py
"""
Depth-one walk over a manifest's declared dependencies.

Each dependency is resolved through a :class:`PackageResolverPort`; a
recursive walk is built by calling :func:`for_each_dep` again from inside
the callback, which leaves cycle detection and depth limits to the caller.
"""

from __future__ import annotations

import logging
import typing as _t

from domain.manifest.errors import DependencyNotFoundError, ManifestNotFoundError

if _t.TYPE_CHECKING:  # pragma: no cover
    from domain.manifest.package import Dependency, Manifest, PackageBase
    from domain.ports.package_resolver_port import PackageResolverPort

logger = logging.getLogger(__name__)

DepCallback = _t.Callable[['Dependency', 'Manifest'], None]


def for_each_dep(manifest: 'PackageBase', resolver: 'PackageResolverPort', callback: DepCallback) -> None:
    """
    Resolve every dependency of ``manifest`` in declared order and hand it,
    with its own manifest, to ``callback``.

    A resolver not-found is raised as :class:`DependencyNotFoundError`;
    every other resolver or callback exception propagates unchanged and
    stops the walk. Nothing is cached.
    """
    logger.debug('  - foreachdep: %s', manifest.name)
    for dep in manifest.dependencies:
        try:
            resolved = resolver.load_package(manifest.language, dep.hash)
        except (ManifestNotFoundError, FileNotFoundError) as exc:
            logger.debug('load_package error for %s (%s): %s', dep.name, dep.hash, exc)
            raise DependencyNotFoundError(dep.name, dep.hash) from exc
        callback(dep, resolved)
