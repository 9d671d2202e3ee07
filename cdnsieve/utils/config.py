"""Configuration loading utilities for cdnsieve.toml."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_SEARCH_PATHS = (Path("config/cdnsieve.toml"), Path("cdnsieve.toml"))
_KNOWN_KEYS = ("request_timeout", "workers", "asn_lookup_url", "providers", "asns")


def _find_config_file(config_path: Path | None) -> Path | None:
    if config_path is not None:
        if not config_path.exists():
            logger.warning(f"Config file {config_path} not found. Using defaults.")
            return None
        return config_path
    # Try config/ directory first, then fall back to current directory
    for candidate in _SEARCH_PATHS:
        if candidate.exists():
            return candidate
    return None


def load_sieve_config(config_path: Path | None = None) -> dict[str, Any] | None:
    """Load the ``[sieve]`` table from cdnsieve.toml if available.

    Example file::

        [sieve]
        request_timeout = 10
        workers = 4

        [sieve.providers.CLOUDFLARE]
        url = "https://www.cloudflare.com/ips-v4"
        format = "plain_text_lines"

        [sieve.asns]
        AKAMAI = ["AS12222", "AS16625"]

    Args:
        config_path: Explicit file; when None, config/cdnsieve.toml then
            ./cdnsieve.toml are tried

    Returns:
        Dict of recognised keys, or None if no usable file was found
    """
    path = _find_config_file(config_path)
    if path is None:
        return None

    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except OSError as e:
        # File not found or can't be read - fall back to default
        logger.debug(f"Could not read {path}: {e}")
        return None
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Failed to parse {path}: {e}. Using defaults.")
        return None

    section = data.get("sieve", {})
    if not isinstance(section, dict):
        logger.warning(f"Ignoring {path}: [sieve] must be a table")
        return None

    unknown = sorted(set(section) - set(_KNOWN_KEYS))
    if unknown:
        logger.warning(f"Ignoring unknown keys in {path}: {', '.join(unknown)}")

    config = {key: section[key] for key in _KNOWN_KEYS if key in section}
    logger.debug(f"Loaded {len(config)} settings from {path}")
    return config if config else None
