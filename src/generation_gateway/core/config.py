"""
Configuration loading for the generation gateway.

Settings come from an optional YAML file, overridden by environment
variables, and are frozen once loaded.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from .catalog import DEFAULT_PROVIDER, SMART_DEFAULT_PROVIDER, ProviderCatalog
from .errors import ProviderNotFoundError
from .interface import Capability

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/generation-gateway/gateway.yaml")


@dataclass(frozen=True)
class GatewaySettings:
    """Complete gateway configuration."""
    default_provider: str = DEFAULT_PROVIDER
    global_provider: Optional[str] = None
    capability_providers: Dict[str, str] = field(default_factory=dict)
    fallback_providers: Tuple[str, ...] = ()
    smart_default_provider: str = SMART_DEFAULT_PROVIDER
    api_keys: Dict[str, str] = field(default_factory=dict)
    base_urls: Dict[str, str] = field(default_factory=dict)
    adapter_options: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    request_timeout: float = 60.0
    probe_timeout: float = 10.0
    stream_delay: float = 0.02

    def primary_provider(self, capability: Capability) -> str:
        """
        Primary backend for a capability.

        Capability override wins over the global override, which wins over
        the built-in default.
        """
        return (
            self.capability_providers.get(capability.value)
            or self.global_provider
            or self.default_provider
        )

    def api_key_for(self, env_key: str) -> Optional[str]:
        return self.api_keys.get(env_key) or None

    def referenced_providers(self) -> List[str]:
        names = [self.default_provider, self.smart_default_provider]
        if self.global_provider:
            names.append(self.global_provider)
        names.extend(self.capability_providers.values())
        names.extend(self.fallback_providers)
        names.extend(self.base_urls)
        names.extend(self.adapter_options)
        return names

    def validate(self, catalog: ProviderCatalog) -> None:
        """
        Check every referenced backend name against the catalog.

        Raises:
            ProviderNotFoundError: On the first unknown name
        """
        for name in self.referenced_providers():
            if name not in catalog:
                raise ProviderNotFoundError(f"Unknown provider in configuration: {name}", provider=name)


def parse_provider_list(value: Union[str, List[str], None]) -> Tuple[str, ...]:
    """Parse a comma-separated (or YAML list) provider list, preserving order."""
    if not value:
        return ()
    items = value.split(",") if isinstance(value, str) else value
    return tuple(item.strip() for item in items if item and item.strip())


def _expand_env(value: Any, environ: Mapping[str, str]) -> Any:
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        return environ.get(value[2:-1], "")
    return value


def _read_yaml(config_path: Optional[str], environ: Mapping[str, str]) -> Dict[str, Any]:
    if config_path is None:
        # an empty value counts as unset
        config_path = environ.get("GATEWAY_CONFIG") or None
    if config_path is None and DEFAULT_CONFIG_PATH.exists():
        config_path = str(DEFAULT_CONFIG_PATH)

    if config_path is None:
        return {}
    if not Path(config_path).exists():
        logger.warning(f"Gateway config file not found: {config_path}, using defaults")
        return {}

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Gateway config must be a mapping: {config_path}")
    return data


def load_settings(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    catalog: Optional[ProviderCatalog] = None,
) -> GatewaySettings:
    """
    Load gateway settings.

    Args:
        config_path: Path to a YAML config file. If None, uses
            $GATEWAY_CONFIG or the default location when present.
        environ: Environment mapping, defaults to os.environ
        catalog: Catalog whose credential keys are read from the environment

    Returns:
        Loaded settings
    """
    environ = os.environ if environ is None else environ
    catalog = catalog or ProviderCatalog()
    data = _read_yaml(config_path, environ)

    api_keys = {
        key: _expand_env(value, environ)
        for key, value in (data.get("api_keys") or {}).items()
    }
    for name in catalog:
        env_key = catalog.get(name).env_key
        if environ.get(env_key):
            api_keys[env_key] = environ[env_key]

    capability_providers = {
        str(k): str(v) for k, v in (data.get("capability_providers") or {}).items() if v
    }
    for capability in Capability:
        override = environ.get(f"AI_{capability.value.upper()}_PROVIDER")
        if override:
            capability_providers[capability.value] = override.strip()

    fallback = parse_provider_list(data.get("fallback_providers"))
    if "FALLBACK_PROVIDERS" in environ:
        fallback = parse_provider_list(environ["FALLBACK_PROVIDERS"])

    global_provider = environ.get("NEXT_AI_PROVIDER") or data.get("global_provider")

    settings = GatewaySettings(
        default_provider=data.get("default_provider", DEFAULT_PROVIDER),
        global_provider=global_provider.strip() if global_provider else None,
        capability_providers=capability_providers,
        fallback_providers=fallback,
        smart_default_provider=data.get("smart_default_provider", SMART_DEFAULT_PROVIDER),
        api_keys=api_keys,
        base_urls=dict(data.get("base_urls") or {}),
        adapter_options={k: dict(v or {}) for k, v in (data.get("adapter_options") or {}).items()},
        request_timeout=float(environ.get("GATEWAY_REQUEST_TIMEOUT", data.get("request_timeout", 60.0))),
        probe_timeout=float(environ.get("GATEWAY_PROBE_TIMEOUT", data.get("probe_timeout", 10.0))),
        stream_delay=float(environ.get("GATEWAY_STREAM_DELAY", data.get("stream_delay", 0.02))),
    )

    configured = [n for n in catalog if settings.api_key_for(catalog.get(n).env_key)]
    logger.info(f"Loaded gateway settings, credentials present for: {configured or 'none'}")
    return settings
