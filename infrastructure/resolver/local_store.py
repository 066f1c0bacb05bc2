import logging
from pathlib import Path
from typing import Dict, List, Tuple, Union

from domain.manifest.errors import ManifestNotFoundError
from domain.manifest.package import Manifest
from domain.ports.package_resolver_port import PackageResolverPort
from infrastructure.persistence.manifest_file import load_manifest

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = 'gx'
DEFAULT_MANIFEST_FILENAME = 'package.json'


def _check_hash(pkg_hash: str) -> str:
    if not isinstance(pkg_hash, str) or not pkg_hash:
        raise ValueError(f'Package hash must be a non-empty string, got {pkg_hash!r}')
    if '/' in pkg_hash or '\\' in pkg_hash or pkg_hash in ('.', '..'):
        raise ValueError(f'Invalid package hash: {pkg_hash!r}')
    return pkg_hash


class LocalStoreResolver(PackageResolverPort):
    """Content-addressed package store on the local filesystem.

    Layout: <root>/<namespace>/<hash>/<manifest_filename>, where the
    namespace is the language hint, or the default namespace when empty.
    """

    def __init__(self, root: Union[str, Path], manifest_filename: str = DEFAULT_MANIFEST_FILENAME, default_namespace: str = DEFAULT_NAMESPACE):
        self.root = Path(root)
        self.manifest_filename = manifest_filename
        self.default_namespace = default_namespace
        logger.info(f'LocalStoreResolver initialized (root: {self.root}, namespace: {self.default_namespace})')

    def package_path(self, language: str, pkg_hash: str) -> Path:
        namespace = language or self.default_namespace
        return self.root / namespace / _check_hash(pkg_hash) / self.manifest_filename

    def load_package(self, language: str, pkg_hash: str) -> Manifest:
        path = self.package_path(language, pkg_hash)
        logger.debug('Resolving %s in %s', pkg_hash, path)
        return load_manifest(path)


class InMemoryPackageResolver(PackageResolverPort):
    """Dict-backed resolver; records every lookup in ``load_calls``."""

    def __init__(self, default_namespace: str = DEFAULT_NAMESPACE):
        self.default_namespace = default_namespace
        self._packages: Dict[Tuple[str, str], Manifest] = {}
        self.load_calls: List[Tuple[str, str]] = []

    def add(self, pkg_hash: str, manifest: Manifest, language: str = '') -> None:
        self._packages[(language or self.default_namespace, pkg_hash)] = manifest

    def load_package(self, language: str, pkg_hash: str) -> Manifest:
        self.load_calls.append((language, pkg_hash))
        key = (language or self.default_namespace, pkg_hash)
        try:
            # Hand out copies so callers cannot mutate the stored manifest.
            return self._packages[key].model_copy(deep=True)
        except KeyError:
            raise ManifestNotFoundError(f'Package {pkg_hash} not found in namespace {key[0]}') from None
