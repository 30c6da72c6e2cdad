# renderkit/config/loader.py
"""
Loads Options from TOML files: ``.renderkit.toml``, ``renderkit.toml`` or the
``[tool.renderkit]`` table of ``pyproject.toml``, first match wins.
"""
import toml
from dataclasses import fields as dataclass_fields
from pathlib import Path
from typing import Any, Dict, Optional
import structlog

from renderkit.exceptions import ConfigError

from .settings import Delims, Options

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".renderkit.toml", "renderkit.toml", "pyproject.toml"]

# keys that cannot come from a file: callables and provider objects.
NON_FILE_OPTIONS = {"funcs", "file_system"}
BYTES_OPTIONS = {"prefix_json", "prefix_xml"}

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file(): return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"could not read config file {file_path}: {e}") from e
    return data.get("tool", {}).get("renderkit", {}) if file_path.name == "pyproject.toml" else data

def find_config_data(search_dir: Optional[Path] = None) -> Dict[str, Any]:
    # returns the settings table of the first config file present in search_dir (default: cwd).
    base = search_dir or Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = base / filename
        data = _load_toml_file_data(candidate)
        if data:
            log.info("loading_project_local_config", path=str(candidate))
            return data
    log.debug("no_configuration_files_loaded", search_dir=str(base))
    return {}

def _coerce_delims(value: Any) -> Delims:
    if isinstance(value, Delims): return value
    if isinstance(value, (list, tuple)) and len(value) == 2 and all(isinstance(v, str) for v in value):
        return Delims(left=value[0], right=value[1])
    if isinstance(value, dict):
        unknown = set(value) - {"left", "right", "block_left", "block_right"}
        if unknown:
            raise ConfigError(f"unknown delims keys: {sorted(unknown)}")
        return Delims(**{k: str(v) for k, v in value.items()})
    raise ConfigError(f"delims must be a table or a [left, right] pair, got {value!r}")

def options_from_mapping(data: Dict[str, Any], **overrides: Any) -> Options:
    """Builds an Options from a settings table; keyword overrides win over the table."""
    option_fields = {f.name: f for f in dataclass_fields(Options)}
    kwargs: Dict[str, Any] = {}

    for key, value in {**data, **overrides}.items():
        if key not in option_fields:
            log.warning("unknown_config_key_ignored", key=key)
            continue
        if key in NON_FILE_OPTIONS and key not in overrides:
            raise ConfigError(f"option '{key}' cannot be set from a config file")

        default = option_fields[key].default
        if key == "delims":
            value = _coerce_delims(value)
        elif key == "extensions":
            if isinstance(value, str): value = [value]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"extensions must be a list of strings, got {value!r}")
        elif key in BYTES_OPTIONS:
            if isinstance(value, str): value = value.encode("utf-8")
            if not isinstance(value, bytes):
                raise ConfigError(f"{key} must be a string, got {value!r}")
        elif isinstance(default, bool):
            if not isinstance(value, bool):
                raise ConfigError(f"{key} must be true or false, got {value!r}")
        elif isinstance(default, str):
            if not isinstance(value, str):
                raise ConfigError(f"{key} must be a string, got {value!r}")
        kwargs[key] = value

    return Options(**kwargs)

def load_options(search_dir: Optional[Path] = None, **overrides: Any) -> Options:
    return options_from_mapping(find_config_data(search_dir), **overrides)
