# infrastructure/persistence/__init__.py
# Manifest file persistence - JSON on the local filesystem

from .json_merge import DocumentMerger, merge_documents
from .manifest_file import dumps_canonical, load_manifest, migrate_legacy_fields, save_manifest, write_json

__all__ = [
    'DocumentMerger',
    'merge_documents',
    'dumps_canonical',
    'load_manifest',
    'migrate_legacy_fields',
    'save_manifest',
    'write_json',
]
