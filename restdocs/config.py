import json
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from restdocs.errors import ConfigError
from restdocs.release_lines import ReleaseLineRegistry

DEFAULT_MARKER = 'rest'


@dataclass(frozen=True)
class SyncConfig:
    frontmatter_defaults: Mapping
    autogenerated_marker: str
    registry: ReleaseLineRegistry


def load_config(path) -> SyncConfig:
    """Load frontmatter defaults and the release line table from a JSON file."""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    defaults = raw.get('frontmatterDefaults', {})
    if not isinstance(defaults, dict):
        raise ConfigError(f"'frontmatterDefaults' in {path} must be an object")
    lines = raw.get('releaseLines')
    if not isinstance(lines, list) or not lines:
        raise ConfigError(f"'releaseLines' in {path} must be a non-empty list")

    return SyncConfig(
        frontmatter_defaults=MappingProxyType(dict(defaults)),
        autogenerated_marker=str(defaults.get('autogenerated', DEFAULT_MARKER)),
        registry=ReleaseLineRegistry.from_config(lines),
    )
