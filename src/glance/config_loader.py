"""Load GlanceConfig from glance.toml / glance.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from glance._errors import ConfigError
from glance.config import GlanceConfig

_CONFIG_KEYS: frozenset[str] = frozenset({
    "host", "port", "open_browser", "watch_mode", "poll_interval_ms",
    "debounce_ms", "heartbeat_interval", "mailbox_capacity",
})


def load_config(root: Path, **overrides: object) -> GlanceConfig:
    """Load GlanceConfig from root, optionally merging a glance config file.

    Looks for glance.toml, glance.yaml, or glance.yml in root. If found, loads
    and merges with overrides. Overrides take precedence; ``None`` overrides
    are ignored so unset CLI flags never mask file values.

    Raises:
        ConfigError: If a config file exists but cannot be parsed, or the
            merged values are invalid.

    """
    file_config = _read_glance_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    if "source" in merged and not isinstance(merged["source"], Path):
        merged["source"] = Path(str(merged["source"]))
    try:
        return GlanceConfig(**merged)  # type: ignore[arg-type]
    except TypeError as exc:
        msg = f"Invalid configuration: {exc}"
        raise ConfigError(msg) from exc


def _read_glance_config(root: Path) -> dict[str, object]:
    """Read glance config from toml/yaml if present. Returns empty dict otherwise."""
    toml_path = root / "glance.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    for name in ("glance.yaml", "glance.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path.name} must contain a mapping at the top level"
        raise ConfigError(msg)
    return _flatten_glance_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_glance_section(data)


def _flatten_glance_section(data: dict[str, object]) -> dict[str, object]:
    """Extract glance.* keys into top-level config.

    Keys under a ``glance`` table win over the same keys at the top level.
    Unknown keys are ignored.
    """
    result: dict[str, object] = {k: v for k, v in data.items() if k in _CONFIG_KEYS}
    section = data.get("glance")
    if isinstance(section, dict):
        result.update({k: v for k, v in section.items() if k in _CONFIG_KEYS})
    return result
