from __future__ import annotations
import copy
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Final, List, Literal, Mapping, Optional, Sequence, Union
import yaml
from pydantic import BaseModel, ConfigDict, Field

from domain.manifest.package import MANIFEST_FORMAT_VERSION, Manifest
from infrastructure.persistence.json_merge import DocumentMerger
from infrastructure.resolver.local_store import DEFAULT_MANIFEST_FILENAME, DEFAULT_NAMESPACE, LocalStoreResolver

__all__: Sequence[str] = ('ConfigLoader', 'DEFAULT_CONFIG', 'ManifestToolConfig', 'setup_logging')
logger = logging.getLogger(__name__)

CONFIG_ENV_VAR: Final[str] = 'GXMANIFEST_CONFIG'

DEFAULT_CONFIG: Dict[str, Any] = {
    'manifest': {
        'filename': DEFAULT_MANIFEST_FILENAME,
        'format_version': MANIFEST_FORMAT_VERSION,
    },
    'store': {
        'root': 'vendor/gx',
        'default_namespace': DEFAULT_NAMESPACE,
    },
    'logging': {
        'level': 'INFO',
        'quiet_loggers': [],
    },
}

_RE_ENV_DEFAULT: Final[re.Pattern[str]] = re.compile('\\$\\{([A-Za-z_][A-Za-z0-9_]*):-(.*?)\\}')


def _interpolate_env(value: str) -> str:
    def _repl(match: re.Match[str]) -> str:
        var, default = (match.group(1), match.group(2))
        return os.getenv(var, default)

    before = value
    value = _RE_ENV_DEFAULT.sub(_repl, value)
    value = os.path.expandvars(value)

    if before != value:
        logger.debug("Env expand: '%s' → '%s'", before, value)
    elif '${' in before:
        logger.warning("Unresolved env var in '%s'", before)

    return value


def _expand_tree(node: Any) -> Any:
    if isinstance(node, dict):
        return {k: _expand_tree(v) for k, v in node.items()}
    if isinstance(node, list):
        return [_expand_tree(v) for v in node]
    if isinstance(node, str):
        return _interpolate_env(node)
    return node


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding='utf-8')
    except FileNotFoundError:
        logger.debug('Config file not found: %s', path)
        return {}

    if path.suffix.lower() == '.json':
        data = json.loads(text) or {}
    else:
        data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        logger.warning('%s does not contain a top‑level mapping – ignored', path)
        return {}
    return data


class ManifestSection(BaseModel):
    model_config = ConfigDict(extra='forbid')

    filename: str = Field(DEFAULT_MANIFEST_FILENAME, min_length=1, description='File name of a package descriptor inside a package directory.')
    format_version: str = Field(MANIFEST_FORMAT_VERSION, description='gxVersion stamped into newly created manifests.')


class StoreSection(BaseModel):
    model_config = ConfigDict(extra='forbid')

    root: Path = Field(Path('vendor/gx'), description='Root directory of the local content-addressed package store.')
    default_namespace: str = Field(DEFAULT_NAMESPACE, min_length=1, description='Namespace used when a manifest declares no language.')


class LoggingSection(BaseModel):
    model_config = ConfigDict(extra='forbid')

    level: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'] = 'INFO'
    quiet_loggers: List[str] = Field(default_factory=list)


class ManifestToolConfig(BaseModel):
    model_config = ConfigDict(extra='forbid')

    manifest: ManifestSection = Field(default_factory=ManifestSection)
    store: StoreSection = Field(default_factory=StoreSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)

    def build_resolver(self) -> LocalStoreResolver:
        return LocalStoreResolver(
            self.store.root,
            manifest_filename=self.manifest.filename,
            default_namespace=self.store.default_namespace,
        )

    def manifest_path(self, package_dir: Union[str, Path]) -> Path:
        return Path(package_dir) / self.manifest.filename

    def create_manifest(self, name: str, **fields: Any) -> Manifest:
        fields.setdefault('gx_version', self.manifest.format_version)
        return Manifest.create(name, **fields)


class ConfigLoader:

    def __init__(self, package_root: Optional[Path]=None) -> None:
        self._package_root: Path = package_root if package_root is not None else Path(__file__).resolve().parents[1]

    def load(self, config_path: Optional[Union[str, Path]]=None, overrides: Optional[Mapping[str, Any]]=None) -> ManifestToolConfig:
        cfg: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)

        layers: list[tuple[str, Path]] = [
            ('DEFAULT_MANIFEST_CONFIG', self._package_root / 'configs' / 'default' / 'manifest_config.yaml')
        ]
        explicit = config_path or os.getenv(CONFIG_ENV_VAR)
        if explicit:
            layers.append(('USER_MANIFEST_CONFIG', Path(explicit).expanduser()))

        for label, path in layers:
            data = _load_yaml(path)
            if data:
                cfg = DocumentMerger.merge(cfg, data, label)
                logger.info('Merged %s: %s', label, path)
            elif label == 'USER_MANIFEST_CONFIG':
                logger.warning('%s not found or empty: %s', label, path)

        if overrides:
            cfg = DocumentMerger.merge(cfg, dict(overrides), 'overrides')

        cfg = _expand_tree(cfg)
        config = ManifestToolConfig.model_validate(cfg)
        logger.debug('Resolved manifest tool config: %s', config.model_dump(mode='json'))
        return config


def setup_logging(config: Optional[ManifestToolConfig]=None, debug: bool=False) -> logging.Logger:
    """Configure a stderr handler for applications embedding the manifest layer."""
    section = config.logging if config is not None else LoggingSection()
    level = logging.DEBUG if debug else getattr(logging, section.level)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)-30s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )
    for logger_name in section.quiet_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
    return logging.getLogger('gxmanifest')
