# domain/manifest/package.py
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, FrozenSet, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer

from domain.manifest.traversal import DepCallback, for_each_dep as _for_each_dep

if TYPE_CHECKING:  # pragma: no cover
    from domain.ports.package_resolver_port import PackageResolverPort

__all__: Sequence[str] = ('MANIFEST_FORMAT_VERSION', 'BugsReference', 'Dependency', 'PackageBase', 'Manifest')

logger = logging.getLogger(__name__)

MANIFEST_FORMAT_VERSION = '0.12.1'

# Keys dropped from the encoded document when they hold a zero value.
# Both attribute names and JSON aliases are listed so that plain
# ``model_dump()`` and ``to_document()`` agree.
_DEP_OMIT_EMPTY: FrozenSet[str] = frozenset({'author', 'name', 'version'})
_PKG_OMIT_EMPTY: FrozenSet[str] = frozenset({
    'name', 'author', 'description', 'keywords', 'version',
    'dependencies', 'gxDependencies',
    'bin', 'build', 'test',
    'release_cmd', 'releaseCmd',
    'tag_cmd', 'tagCmd',
    'subtool_required', 'subtoolRequired',
    'language',
})


def _is_zero(value: Any) -> bool:
    return value is None or value is False or value == '' or value == []


def _drop_zero(data: Dict[str, Any], keys: FrozenSet[str]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if not (k in keys and _is_zero(v))}


class BugsReference(BaseModel):
    """Bug-tracker reference. Always the object form once in memory."""
    model_config = ConfigDict(extra='ignore', validate_assignment=True)

    url: str = ''

    @model_serializer(mode='wrap')
    def _serialize(self, handler: Callable[[Any], Dict[str, Any]]) -> Dict[str, Any]:
        return _drop_zero(handler(self), frozenset({'url'}))


class Dependency(BaseModel):
    """A reference to another package; ``hash`` is its identity."""
    model_config = ConfigDict(extra='ignore', validate_assignment=True)

    author: str = ''
    name: str = ''
    hash: str = Field(..., description='Content hash used to resolve the dependency.')
    version: str = ''

    def matches(self, ref: str) -> bool:
        return self.hash == ref or self.name == ref

    @model_serializer(mode='wrap')
    def _serialize(self, handler: Callable[[Any], Dict[str, Any]]) -> Dict[str, Any]:
        return _drop_zero(handler(self), _DEP_OMIT_EMPTY)


class PackageBase(BaseModel):
    """
    Typed shape of a package descriptor (``package.json``).

    Unknown keys are ignored on decode; they survive on disk because the
    writer merges the encoded manifest over the existing file.
    """
    model_config = ConfigDict(extra='ignore', populate_by_name=True, validate_assignment=True)

    name: str = ''
    author: str = ''
    description: str = ''
    keywords: List[str] = Field(default_factory=list)
    version: str = ''
    dependencies: List[Dependency] = Field(default_factory=list, alias='gxDependencies')
    bin: str = ''
    build: str = ''
    test: str = ''
    release_cmd: str = Field('', alias='releaseCmd')
    tag_cmd: str = Field('', alias='tagCmd')
    subtool_required: bool = Field(False, alias='subtoolRequired', strict=True)
    language: str = ''
    license: str = ''
    bugs: BugsReference = Field(default_factory=BugsReference)
    gx_version: str = Field('', alias='gxVersion')

    @field_validator('bugs', mode='before')
    @classmethod
    def _null_bugs(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator('keywords', 'dependencies', mode='before')
    @classmethod
    def _null_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @model_serializer(mode='wrap')
    def _serialize(self, handler: Callable[[Any], Dict[str, Any]]) -> Dict[str, Any]:
        return _drop_zero(handler(self), _PKG_OMIT_EMPTY)

    def to_document(self) -> Dict[str, Any]:
        """Generic JSON document exactly as it will be written to disk."""
        return self.model_dump(mode='json', by_alias=True)

    def find_dep(self, ref: str) -> Optional[Dependency]:
        """Return the first dependency whose hash or name equals ``ref``."""
        for dep in self.dependencies:
            if dep.matches(ref):
                return dep
        return None

    def dependency_hashes(self) -> List[str]:
        return [dep.hash for dep in self.dependencies]

    def for_each_dep(self, resolver: 'PackageResolverPort', callback: DepCallback) -> None:
        _for_each_dep(self, resolver, callback)


class Manifest(PackageBase):
    """Package descriptor plus the opaque ``gx`` extension payload."""

    gx: Optional[Any] = Field(None, description='Tool-specific extension data, preserved without interpretation.')

    @model_serializer(mode='wrap')
    def _serialize(self, handler: Callable[[Any], Dict[str, Any]]) -> Dict[str, Any]:
        data = _drop_zero(handler(self), _PKG_OMIT_EMPTY)
        if data.get('gx') is None:
            data.pop('gx', None)
        return data

    @classmethod
    def create(cls, name: str, *, language: str = '', version: str = '', license: str = '', author: str = '', description: str = '', gx_version: str = MANIFEST_FORMAT_VERSION) -> 'Manifest':
        if not isinstance(name, str) or not name.strip():
            raise ValueError('Manifest name must be a non-empty string')
        logger.debug('Creating manifest for %s (language=%r, gxVersion=%s)', name, language, gx_version)
        return cls(
            name=name.strip(),
            language=language,
            version=version,
            license=license,
            author=author,
            description=description,
            gx_version=gx_version,
        )
