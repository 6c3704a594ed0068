"""Load TabbyConfig from tabby.yaml / tabby.toml and the campaign registry.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from tabby._errors import ConfigError
from tabby.config import TabbyConfig

if TYPE_CHECKING:
    from tabby._types import Campaign

_CONFIG_KEYS = frozenset({
    "src_dir", "output", "data_dir", "campaigns_file",
    "host", "port", "reload_path", "clean",
})


def load_config(root: Path, **overrides: object) -> TabbyConfig:
    """Load TabbyConfig from root, optionally merging tabby.yaml.

    Looks for tabby.yaml, tabby.yml, or tabby.toml in root. If found, loads
    and merges with overrides. Overrides take precedence; ``None`` overrides
    are ignored so unset CLI flags fall through to the file.
    """
    file_config = _read_tabby_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    if "output" in merged and not isinstance(merged["output"], Path):
        merged["output"] = Path(str(merged["output"]))
    return TabbyConfig(root=root, **merged)


def _read_tabby_config(root: Path) -> dict[str, object]:
    """Read tabby config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("tabby.yaml", "tabby.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "tabby.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Cannot read {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return _flatten_tabby_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Cannot read {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_tabby_section(data)


def _flatten_tabby_section(data: dict[str, object]) -> dict[str, object]:
    """Extract tabby.* keys into top-level config, dropping unknown keys."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k in _CONFIG_KEYS:
            result[k] = v
    section = data.get("tabby")
    if isinstance(section, dict):
        for k, v in section.items():
            if k in _CONFIG_KEYS:
                result[k] = v
    return result


# ---------------------------------------------------------------------------
# Campaign registry
# ---------------------------------------------------------------------------


def load_campaigns(path: Path) -> list[Campaign]:
    """Load the campaign registry (``{"campaigns": [...]}``) from *path*.

    Every entry needs a ``slug`` and a ``name``; slugs must be unique
    because they double as output directories.

    Raises:
        ConfigError: If the file is missing, malformed, or an entry is invalid.

    """
    if not path.is_file():
        msg = f"Campaigns file not found: {path}"
        raise ConfigError(msg)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Cannot read campaigns file {path}: {exc}"
        raise ConfigError(msg) from exc

    campaigns = data.get("campaigns", []) if isinstance(data, dict) else None
    if not isinstance(campaigns, list):
        msg = f"{path}: expected an object with a 'campaigns' list"
        raise ConfigError(msg)

    seen: set[str] = set()
    for index, entry in enumerate(campaigns):
        if not isinstance(entry, dict):
            msg = f"{path}: campaign #{index} is not an object"
            raise ConfigError(msg)
        for key in ("name", "slug"):
            if not entry.get(key):
                msg = f"{path}: campaign #{index} is missing {key!r}"
                raise ConfigError(msg)
        slug = str(entry["slug"])
        if slug in seen:
            msg = f"{path}: duplicate campaign slug {slug!r}"
            raise ConfigError(msg)
        seen.add(slug)

    return campaigns
