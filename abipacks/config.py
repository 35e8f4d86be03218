"""Configuration loading for abipacks (.abipacks.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .models import DEFAULT_API_ROUTE, DEFAULT_NETWORK, NetworkConfig, RateLimitPolicy

CONFIG_FILENAME = ".abipacks.yml"
DEFAULT_CONTRACTS_DIR = "contracts"
DEFAULT_OUTPUT_DIR = "abi_packs"
DEFAULT_REQUEST_TIMEOUT = 30.0


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class NetworkSettings:
    """Explorer settings for one network before API keys are resolved."""

    base_url: str
    api_key_env: Optional[str] = None
    api_key: Optional[str] = None
    api_route: str = DEFAULT_API_ROUTE
    rate: int = 5
    per_seconds: float = 1.0
    concurrent: int = 1


BUILTIN_NETWORKS: Dict[str, NetworkSettings] = {
    "ethereum": NetworkSettings(base_url="https://api.etherscan.io", api_key_env="ETHERSCAN_KEY"),
    "polygon": NetworkSettings(base_url="https://api.polygonscan.com", api_key_env="POLYGON_KEY"),
    "binance": NetworkSettings(base_url="https://api.bscscan.com", api_key_env="BINANCE_KEY"),
    "avalanche": NetworkSettings(base_url="https://api.snowtrace.io", api_key_env="SNOWTRACE_KEY"),
}


@dataclass
class BuilderConfig:
    """Resolved settings for a pack build run."""

    root: Path
    contracts_dir: Path
    output_dir: Path
    default_network: str = DEFAULT_NETWORK
    networks: Dict[str, NetworkConfig] = field(default_factory=dict)
    emit_empty_packs: bool = True
    skip_read_only: bool = False
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT


def load_config(
    config_path: Path, *, environ: Optional[Mapping[str, str]] = None
) -> BuilderConfig:
    """Load configuration from disk and resolve API keys from the environment.

    This is the only place the environment is read; everything downstream
    receives the resolved :class:`BuilderConfig`.
    """
    env = os.environ if environ is None else environ
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    settings = dict(BUILTIN_NETWORKS)
    for name, raw in _as_dict(data.get("networks")).items():
        settings[str(name)] = _network_settings(str(name), _as_dict(raw), settings.get(str(name)))

    networks = {name: _resolve_network(name, item, env) for name, item in settings.items()}

    default_network = _as_str(data.get("default_network")) or DEFAULT_NETWORK
    if default_network not in networks:
        raise ConfigError(f"default_network '{default_network}' has no network settings")

    request_timeout = _as_float(data.get("request_timeout"))
    if request_timeout is not None and request_timeout <= 0:
        raise ConfigError("request_timeout must be positive")

    emit_empty = _as_bool(data.get("emit_empty_packs"))
    skip_read_only = _as_bool(data.get("skip_read_only"))

    return BuilderConfig(
        root=root,
        contracts_dir=root / (_as_str(data.get("contracts_dir")) or DEFAULT_CONTRACTS_DIR),
        output_dir=root / (_as_str(data.get("output_dir")) or DEFAULT_OUTPUT_DIR),
        default_network=default_network,
        networks=networks,
        emit_empty_packs=True if emit_empty is None else emit_empty,
        skip_read_only=bool(skip_read_only),
        request_timeout=request_timeout or DEFAULT_REQUEST_TIMEOUT,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _network_settings(
    name: str, data: Dict[str, Any], base: Optional[NetworkSettings]
) -> NetworkSettings:
    base_url = _as_str(data.get("base_url")) or (base.base_url if base else None)
    if not base_url:
        raise ConfigError(f"Network '{name}' requires a base_url")
    fallback = base or NetworkSettings(base_url=base_url)
    rate = _as_int(data.get("rate"))
    per_seconds = _as_float(data.get("per_seconds"))
    concurrent = _as_int(data.get("concurrent"))
    settings = NetworkSettings(
        base_url=base_url,
        api_key_env=_as_str(data.get("api_key_env")) or fallback.api_key_env,
        api_key=_as_str(data.get("api_key")) or fallback.api_key,
        api_route=_as_str(data.get("api_route")) or fallback.api_route,
        rate=fallback.rate if rate is None else rate,
        per_seconds=fallback.per_seconds if per_seconds is None else per_seconds,
        concurrent=fallback.concurrent if concurrent is None else concurrent,
    )
    if settings.rate <= 0 or settings.per_seconds <= 0 or settings.concurrent <= 0:
        raise ConfigError(f"Network '{name}' rate limits must be positive")
    return settings


def _resolve_network(name: str, settings: NetworkSettings, env: Mapping[str, str]) -> NetworkConfig:
    api_key = settings.api_key
    if api_key is None and settings.api_key_env:
        api_key = env.get(settings.api_key_env)
    return NetworkConfig(
        name=name,
        base_url=settings.base_url,
        api_key=api_key or "",
        api_route=settings.api_route,
        rate_limit=RateLimitPolicy(
            rate=settings.rate,
            per_seconds=settings.per_seconds,
            concurrent=settings.concurrent,
        ),
    )


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
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
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None

