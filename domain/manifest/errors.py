"""
Exception classes for the manifest layer.

Every failure raised while loading, saving or traversing a package
descriptor derives from :class:`ManifestError`, so callers can catch the
whole family at once or pick the specific condition they can recover from
(e.g. create-on-demand after :class:`ManifestNotFoundError`).
"""

from pathlib import Path
from typing import List, Optional, Union


class ManifestError(Exception):
    """Base exception for all manifest-related errors."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.path is not None:
            return f"{base_msg} (path={self.path})"
        return base_msg


class ManifestNotFoundError(ManifestError):
    """Raised when no manifest exists at the requested location."""
    pass


class MalformedManifestError(ManifestError):
    """
    Raised when a manifest is not a decodable JSON object.

    Applies both on load and on save, when the file already on disk cannot
    be decoded; the write is refused rather than overwriting the file.
    """
    pass


class SchemaMismatchError(ManifestError):
    """
    Raised when a manifest decodes as JSON but violates the descriptor shape,
    e.g. a dependency entry without a hash.
    """

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None, validation_errors: Optional[List[str]] = None):
        super().__init__(message, path=path)
        self.validation_errors = validation_errors or []

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.validation_errors:
            error_list = "\n  - ".join(self.validation_errors)
            return f"{base_msg}\nValidation errors:\n  - {error_list}"
        return base_msg


class DependencyNotFoundError(ManifestError):
    """Raised when the resolver has no package for a declared dependency."""

    def __init__(self, dep_name: str, dep_hash: str):
        super().__init__(f"package {dep_name} ({dep_hash}) not found")
        self.dep_name = dep_name
        self.dep_hash = dep_hash


__all__ = [
    'ManifestError',
    'ManifestNotFoundError',
    'MalformedManifestError',
    'SchemaMismatchError',
    'DependencyNotFoundError',
]
