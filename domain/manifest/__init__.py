# domain/manifest/__init__.py
from .errors import (
    DependencyNotFoundError,
    MalformedManifestError,
    ManifestError,
    ManifestNotFoundError,
    SchemaMismatchError,
)
from .package import MANIFEST_FORMAT_VERSION, BugsReference, Dependency, Manifest, PackageBase
from .traversal import for_each_dep

__all__ = [
    'MANIFEST_FORMAT_VERSION',
    'BugsReference',
    'Dependency',
    'Manifest',
    'PackageBase',
    'for_each_dep',
    'ManifestError',
    'ManifestNotFoundError',
    'MalformedManifestError',
    'SchemaMismatchError',
    'DependencyNotFoundError',
]
