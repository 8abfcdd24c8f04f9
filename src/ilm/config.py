"""
Check parameters and where their defaults come from.

The check itself only ever sees a CheckParams record. Reading the host
application's logger configuration to compute default metadata keys is
done here, once, by the caller.

Host logger configuration (YAML rendering of `config :logger, :console, ...`):

    logger:
      console:
        format: "[$level] $message $metadata\\n"
        metadata: [error_code, file]

Params file:

    ignored_logger_metadata:
      metadata_keys: [error_code, file, request_id]
      ignore_logger_functions: [debug]
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

PARAMS_SECTION = "ignored_logger_metadata"
KNOWN_PARAMS = {"metadata_keys", "ignore_logger_functions", "logger_module"}


class ConfigError(Exception):
    """Raised when a params or logger configuration file is malformed."""
    pass


def normalize_key(key: Any) -> str:
    """`:error_code` and `error_code` name the same key."""
    if not isinstance(key, str):
        raise ConfigError(f"Expected a key name, got {key!r}")
    key = key.strip()
    if key.startswith(":"):
        key = key[1:]
    if not key:
        raise ConfigError("Empty key name")
    return key


def _key_set(value: Any, name: str) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise ConfigError(f"'{name}' must be a list, got {type(value).__name__}")
    return frozenset(normalize_key(k) for k in value)


@dataclass(frozen=True)
class CheckParams:
    """
    Parameters of the ignored Logger metadata check.

    Properties:
        metadata_keys: Keys the console backend renders
        ignore_functions: Logger functions never checked
        logger_module: Module whose calls are Logger calls
    """

    metadata_keys: FrozenSet[str] = field(default_factory=frozenset)
    ignore_functions: FrozenSet[str] = field(default_factory=frozenset)
    logger_module: str = "Logger"

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        default_metadata_keys: Iterable[str] = (),
    ) -> "CheckParams":
        """
        Build params from a mapping using the check's param names.

        `metadata_keys` falls back to `default_metadata_keys` when absent.
        Unknown keys are reported with a UserWarning and ignored.
        """
        unknown = set(data) - KNOWN_PARAMS
        if unknown:
            warnings.warn(f"Unknown check params ignored: {sorted(unknown)}", UserWarning)

        if "metadata_keys" in data:
            metadata_keys = _key_set(data["metadata_keys"], "metadata_keys")
        else:
            metadata_keys = frozenset(normalize_key(k) for k in default_metadata_keys)

        ignore_functions = _key_set(data.get("ignore_logger_functions"), "ignore_logger_functions")

        logger_module = data.get("logger_module", "Logger")
        if not isinstance(logger_module, str) or not logger_module:
            raise ConfigError(f"'logger_module' must be a module name, got {logger_module!r}")

        return cls(
            metadata_keys=metadata_keys,
            ignore_functions=ignore_functions,
            logger_module=logger_module,
        )


def default_metadata_keys(logger_config: Optional[Mapping[str, Any]]) -> FrozenSet[str]:
    """
    Metadata keys declared for the console backend.

    Reads `logger -> console -> metadata`; missing levels mean no keys.
    """
    if not logger_config:
        return frozenset()
    section = logger_config.get("logger") or {}
    if not isinstance(section, Mapping):
        raise ConfigError("'logger' section must be a mapping")
    console = section.get("console") or {}
    if not isinstance(console, Mapping):
        raise ConfigError("'logger.console' section must be a mapping")
    return _key_set(console.get("metadata"), "logger.console.metadata")


def _load_yaml_mapping(path: Path) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}")
    return data


def load_logger_config(path: Path) -> Dict[str, Any]:
    """Load the host application's logger configuration."""
    data = _load_yaml_mapping(path)
    logger.debug("Loaded logger config from %s", path)
    return data


def load_params(path: Optional[Path] = None, logger_config: Optional[Mapping[str, Any]] = None) -> CheckParams:
    """
    Load check params from a YAML file.

    Params may sit at the top level or under an `ignored_logger_metadata:`
    section. Without a file, defaults are computed from `logger_config`.
    """
    defaults = default_metadata_keys(logger_config)
    if path is None:
        return CheckParams(metadata_keys=defaults)

    data = _load_yaml_mapping(path)
    if PARAMS_SECTION in data:
        data = data[PARAMS_SECTION] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"'{PARAMS_SECTION}' section must be a mapping")

    params = CheckParams.from_mapping(data, default_metadata_keys=defaults)
    logger.debug("Loaded check params from %s: %s", path, params)
    return params
