"""Configuration loading for genfix (.genfix.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".genfix.yml"
MAX_BATCH_SIZE = 15


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class EscalationConfig:
    """Settings for the remote LLM fixer."""

    enabled: bool = False
    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None
    batch_size: int = MAX_BATCH_SIZE
    strict_scope: bool = False


@dataclass
class RepairConfig:
    """Repair pass selection."""

    disabled_passes: List[str] = field(default_factory=list)


@dataclass
class DependencyConfig:
    """Extra package pins merged over the built-in table."""

    known_packages: Dict[str, str] = field(default_factory=dict)


@dataclass
class GenFixConfig:
    """Represents the settings defined in .genfix.yml."""

    root: Path
    escalation: EscalationConfig = field(default_factory=EscalationConfig)
    repair: RepairConfig = field(default_factory=RepairConfig)
    dependencies: DependencyConfig = field(default_factory=DependencyConfig)
    exclude_paths: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> GenFixConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GenFixConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    escalation = EscalationConfig()
    escalation_data = _as_dict(data.get("escalation"))
    if escalation_data:
        escalation.enabled = bool(_as_bool(escalation_data.get("enabled")))
        escalation.model = _as_str(escalation_data.get("model"))
        escalation.base_url = _as_str(escalation_data.get("base_url"))
        escalation.api_key = _as_str(escalation_data.get("api_key"))
        escalation.temperature = _as_float(escalation_data.get("temperature"))
        escalation.max_tokens = _as_int(escalation_data.get("max_tokens"))
        escalation.request_timeout = _as_float(escalation_data.get("request_timeout"))
        batch_size = _as_int(escalation_data.get("batch_size"))
        if batch_size is not None:
            escalation.batch_size = max(1, min(batch_size, MAX_BATCH_SIZE))
        escalation.strict_scope = bool(_as_bool(escalation_data.get("strict_scope")))

    repair = RepairConfig()
    repair_data = _as_dict(data.get("repair"))
    if repair_data:
        repair.disabled_passes = _as_str_list(repair_data.get("disabled_passes"))

    dependencies = DependencyConfig()
    dependency_data = _as_dict(data.get("dependencies"))
    if dependency_data:
        known = _as_dict(dependency_data.get("known_packages"))
        dependencies.known_packages = {
            str(name): str(version)
            for name, version in known.items()
            if _as_str(version)
        }

    return GenFixConfig(
        root=root,
        escalation=escalation,
        repair=repair,
        dependencies=dependencies,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "ConfigError",
    "DependencyConfig",
    "EscalationConfig",
    "GenFixConfig",
    "RepairConfig",
    "load_config",
]
