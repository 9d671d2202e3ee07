"""Runtime configuration helpers for cdnsieve."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from .ranges.registry import (
    DEFAULT_ASN_LOOKUP_URL,
    DEFAULT_ASNS,
    DEFAULT_PROVIDERS,
    ASNRegistry,
    ProviderRegistry,
    freeze_asn_registry,
    freeze_provider_registry,
    validate_lookup_url,
)
from .utils.config import load_sieve_config

_DEFAULT_REQUEST_TIMEOUT = 30.0
_DEFAULT_WORKERS = 1


def _coerce_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _coerce_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value.strip())
    except ValueError:
        return default


@dataclass(slots=True)
class SieveSettings:
    """Normalized configuration for range fetching and classification.

    Registries are frozen on construction so fetchers never share mutable state.

    Raises:
        ValueError: If request_timeout is not positive, workers is below 1 or
            asn_lookup_url is not a usable template
    """

    request_timeout: float = _DEFAULT_REQUEST_TIMEOUT
    workers: int = _DEFAULT_WORKERS
    asn_lookup_url: str = DEFAULT_ASN_LOOKUP_URL
    providers: ProviderRegistry = field(default_factory=lambda: DEFAULT_PROVIDERS)
    asns: ASNRegistry = field(default_factory=lambda: DEFAULT_ASNS)

    def __post_init__(self) -> None:
        """Validate numeric settings and freeze the registries."""
        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        validate_lookup_url(self.asn_lookup_url)
        self.providers = freeze_provider_registry(self.providers)
        self.asns = freeze_asn_registry(self.asns)

    @classmethod
    def from_sources(
        cls,
        config: Mapping[str, Any] | None = None,
        env_prefix: str = "CDNSIEVE_",
        config_path: Path | None = None,
    ) -> "SieveSettings":
        """Build settings from defaults, config file, environment and an explicit mapping.

        Precedence order (highest to lowest):
        1. Explicit config mapping values
        2. Environment variables
        3. ``[sieve]`` table of cdnsieve.toml
        4. Default values
        """
        cfg: dict[str, Any] = {
            "request_timeout": _DEFAULT_REQUEST_TIMEOUT,
            "workers": _DEFAULT_WORKERS,
            "asn_lookup_url": DEFAULT_ASN_LOOKUP_URL,
            "providers": DEFAULT_PROVIDERS,
            "asns": DEFAULT_ASNS,
        }

        file_config = load_sieve_config(config_path)
        if file_config:
            cfg.update({k: v for k, v in file_config.items() if k in cfg and v is not None})

        # Track which keys were explicitly provided in config
        config_keys: set[str] = set()
        if config:
            config_keys = {k for k, v in config.items() if v is not None}
            cfg.update({k: v for k, v in config.items() if v is not None})

        env = os.environ
        prefix = env_prefix.upper()

        # Only apply env overrides for keys not in config
        if "request_timeout" not in config_keys:
            cfg["request_timeout"] = _coerce_float(
                env.get(f"{prefix}REQUEST_TIMEOUT"), float(cfg["request_timeout"])
            )

        if "workers" not in config_keys:
            cfg["workers"] = _coerce_int(env.get(f"{prefix}WORKERS"), int(cfg["workers"]))

        if "asn_lookup_url" not in config_keys:
            url_override = env.get(f"{prefix}ASN_LOOKUP_URL")
            if url_override:
                cfg["asn_lookup_url"] = url_override.strip()

        return cls(**cfg)


def load_sieve_settings(
    config: Mapping[str, Any] | None = None,
    env_prefix: str = "CDNSIEVE_",
    config_path: Path | None = None,
) -> SieveSettings:
    """Convenience wrapper used by CLI entry points."""
    return SieveSettings.from_sources(config=config, env_prefix=env_prefix, config_path=config_path)


__all__ = ["SieveSettings", "load_sieve_settings"]
