"""
Manifest file I/O
─────────────────
* Loading of ``package.json`` with in-memory migration of legacy fields
* Strict decoding into the pydantic manifest schema
* Merge-on-save: keys on disk that the schema does not know are kept
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Type, TypeVar, Union

from pydantic import ValidationError

from domain.manifest.errors import MalformedManifestError, ManifestNotFoundError, SchemaMismatchError
from domain.manifest.package import Manifest, PackageBase
from infrastructure.persistence.json_merge import DocumentMerger

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
M = TypeVar('M', bound=PackageBase)

_INDENT = 2


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #
def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise ManifestNotFoundError('Manifest file not found', path=path) from exc


def _reject_constant(name: str) -> Any:
    raise ValueError(f'{name} is not a valid JSON value')


def _decode_object(data: bytes, path: Path) -> Dict[str, Any]:
    try:
        doc = json.loads(data, parse_constant=_reject_constant)
    except ValueError as exc:
        raise MalformedManifestError(f'Manifest is not valid JSON: {exc}', path=path) from exc
    if not isinstance(doc, dict):
        raise MalformedManifestError(f'Manifest top-level value must be an object, got {type(doc).__name__}', path=path)
    return doc


def _format_validation_errors(exc: ValidationError) -> List[str]:
    errors = []
    for err in exc.errors():
        loc = '.'.join(str(part) for part in err.get('loc', ())) or '<root>'
        errors.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return errors


def dumps_canonical(doc: Dict[str, Any]) -> str:
    """2-space indented JSON, non-ASCII kept verbatim, one trailing newline."""
    return json.dumps(doc, indent=_INDENT, ensure_ascii=False, allow_nan=False) + '\n'


def write_json(doc: Dict[str, Any], path: PathLike) -> None:
    path = Path(path)
    # Serialise and encode before opening; open() truncates the file.
    data = dumps_canonical(doc).encode('utf-8')
    path.write_bytes(data)
    logger.debug('Wrote %d bytes to %s', len(data), path)


# --------------------------------------------------------------------------- #
# Migration
# --------------------------------------------------------------------------- #
def migrate_legacy_fields(doc: Dict[str, Any]) -> bool:
    """
    Upgrade legacy shapes in a freshly decoded manifest document, in place.

    Older manifests stored ``bugs`` as a bare URL string; it becomes
    ``{"url": <string>}``. Returns True when the document was changed.
    """
    bugs = doc.get('bugs')
    if isinstance(bugs, str):
        doc['bugs'] = {'url': bugs}
        return True
    return False


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #
def load_manifest(path: PathLike, model: Type[M] = Manifest) -> M:
    """
    Read, migrate and strictly decode the manifest at ``path``.

    Raises ManifestNotFoundError, MalformedManifestError or
    SchemaMismatchError; other OSErrors propagate unchanged.
    """
    path = Path(path)
    logger.debug('Loading manifest: %s', path)
    doc = _decode_object(_read_bytes(path), path)

    if migrate_legacy_fields(doc):
        logger.info('Migrated legacy string "bugs" field to object form in %s', path)

    try:
        manifest = model.model_validate(doc)
    except ValidationError as exc:
        raise SchemaMismatchError(
            'Manifest does not match the package schema',
            path=path,
            validation_errors=_format_validation_errors(exc),
        ) from exc

    logger.debug('Manifest loaded: %s@%s (%d deps)', manifest.name, manifest.version, len(manifest.dependencies))
    return manifest


def save_manifest(manifest: PackageBase, path: PathLike) -> None:
    """
    Persist ``manifest`` at ``path``.

    A new file receives the manifest's own document. An existing file is
    decoded and the manifest is deep-merged over it, so keys unknown to the
    schema survive; an undecodable existing file blocks the write.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        logger.info('Creating manifest %s', path)
        write_json(manifest.to_document(), path)
        return

    current = _decode_object(data, path)
    incoming = manifest.to_document()
    merged = DocumentMerger.merge(current, incoming, context_description=f'save:{path.name}')
    write_json(merged, path)
    logger.info('Saved manifest %s', path)
