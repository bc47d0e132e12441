# tmplt/config/loader.py
"""
Handles loading and merging of tmplt settings from TOML files, and of the
values tree from YAML values files and --set overrides.
"""
import toml
import yaml
from collections.abc import Mapping
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Optional
import structlog

from tmplt.exceptions import ConfigError

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".tmplt.toml", "tmplt.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "tmplt"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

CONFIG_KEY_TO_RENDERCONFIG_ATTR_MAP: Dict[str, str] = {
    "dir": "base_dir",
    "base_dir": "base_dir",
    "values": "values_files",
    "values_files": "values_files",
    "set": "set_values",
    "output": "output_file",
    "output_file": "output_file",
    "encoding": "encoding",
    "contain_paths": "contain_paths",
}

# keys read by the CLI itself rather than mapped onto RenderConfig.
CLI_ONLY_KEYS = {"log_level"}

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file(): return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
        return data.get("tool", {}).get("tmplt", {}) if file_path.name == "pyproject.toml" else data
    except (OSError, toml.TomlDecodeError) as e:
        log.error("config_file_load_error", path=str(file_path), error=str(e))
        return {}

def load_and_merge_configs(cwd: Optional[Path] = None) -> Dict[str, Any]:
    # user-global settings first, then the first project file found in cwd.
    project_dir = cwd or Path.cwd()
    merged_toml_data: Dict[str, Any] = {}
    if USER_CONFIG_FILE.is_file():
        log.info("loading_user_global_config", path=str(USER_CONFIG_FILE))
        merged_toml_data.update(_load_toml_file_data(USER_CONFIG_FILE))

    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = project_dir / filename
        if candidate.is_file():
            project_settings = _load_toml_file_data(candidate)
            if project_settings:
                log.info("loading_project_local_config", path=str(candidate))
                merged_toml_data.update(project_settings)
                break
    if not merged_toml_data: log.debug("no_configuration_files_loaded")
    return merged_toml_data

def config_to_render_options(toml_data: Dict[str, Any]) -> Dict[str, Any]:
    """Maps config file keys onto RenderConfig keyword arguments."""
    options: Dict[str, Any] = {}
    for key, value in toml_data.items():
        attr = CONFIG_KEY_TO_RENDERCONFIG_ATTR_MAP.get(key)
        if attr is None:
            if key not in CLI_ONLY_KEYS:
                log.warning("unknown_config_key_ignored", key=key)
            continue
        if attr == "values_files" and isinstance(value, str):
            value = [value]
        if attr == "set_values" and not isinstance(value, dict):
            raise ConfigError(f"Config key '{key}' must be a table, got {type(value).__name__}")
        options[attr] = value
    return options

def _deep_merge(base: Mapping, overrides: Mapping) -> Dict[str, Any]:
    merged: Dict[str, Any] = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged

def _assign_nested(target: Dict[str, Any], path: List[str], value: Any) -> None:
    current = target
    for segment in path[:-1]:
        existing = current.get(segment)
        if not isinstance(existing, dict):
            existing = {}
            current[segment] = existing
        current = existing
    current[path[-1]] = value

def _read_values_file(values_path: Path) -> Dict[str, Any]:
    try:
        raw = yaml.safe_load(values_path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise ConfigError(f"Failed to read values file {values_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse values file {values_path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Values file {values_path} must contain a mapping at the top level.")
    return raw

def _parse_set_value(raw_value: Any) -> Any:
    if not isinstance(raw_value, str):
        return raw_value
    try:
        return yaml.safe_load(raw_value)
    except yaml.YAMLError:
        return raw_value

def parse_set_assignments(assignments: List[str]) -> Dict[str, str]:
    # turns ("a.b=1", "c=x") into {"a.b": "1", "c": "x"}.
    parsed: Dict[str, str] = {}
    for item in assignments:
        if "=" not in item:
            raise ConfigError(f"Invalid --set value '{item}', expected KEY=VALUE")
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise ConfigError(f"Invalid --set value '{item}', key is empty")
        parsed[key] = value
    return parsed

def load_values(values_files: List[Path], set_values: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Deep-merges the values files in order, then applies dotted --set
    assignments. Right-hand sides of --set are parsed as YAML scalars.
    """
    merged: Dict[str, Any] = {}
    for values_path in values_files:
        log.info("loading_values_file", path=str(values_path))
        merged = _deep_merge(merged, _read_values_file(values_path))
    for dotted_key, raw_value in (set_values or {}).items():
        _assign_nested(merged, dotted_key.split("."), _parse_set_value(raw_value))
    log.debug("values_loaded", top_level_keys=list(merged))
    return merged
