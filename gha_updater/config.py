"""
Configuration file support for gha-updater.

Looks for a .gha-updater.yml file in the project root and loads settings
that control where tags are listed from, which actions are never checked,
and which workflow files are skipped.

Example .gha-updater.yml:

    # Host the action repositories live on
    host: github.com

    # Seconds to wait for each `git ls-remote` before giving up
    timeout: 30

    # Repositories to never check (glob patterns against owner/repo)
    ignore:
      - my-org/*
      - actions/cache

    # Workflow files to exclude (glob patterns)
    exclude:
      - "**/legacy-*.yml"
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from gha_updater.resolver.tags import DEFAULT_HOST, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".gha-updater.yml"


@dataclass
class Config:
    """Parsed gha-updater configuration."""
    host: str = DEFAULT_HOST
    timeout: float = DEFAULT_TIMEOUT
    ignore: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)


def load_config(config_path: Optional[str] = None, scan_path: Optional[str] = None) -> Config:
    """
    Load configuration from a .gha-updater.yml file.

    Search order:
      1. Explicit config_path if provided
      2. .gha-updater.yml in the scan_path directory (or its parent if scan_path is a file),
         then in each parent directory
      3. .gha-updater.yml in the current working directory

    Returns a Config with defaults if no config file is found.
    """
    path = _find_config_file(config_path, scan_path)

    if path is None:
        logger.debug("No config file found, using defaults")
        return Config()

    logger.info("Loading config from %s", path)

    with open(path, "r") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.warning("Config file %s is not valid YAML, using defaults: %s", path, e)
            return Config()

    if not isinstance(raw, dict):
        logger.warning("Config file is not a YAML mapping, using defaults")
        return Config()

    timeout = raw.get("timeout", DEFAULT_TIMEOUT)
    try:
        timeout = float(timeout)
    except (TypeError, ValueError):
        logger.warning("Invalid timeout %r in config, using %s", timeout, DEFAULT_TIMEOUT)
        timeout = DEFAULT_TIMEOUT

    return Config(
        host=str(raw.get("host") or DEFAULT_HOST),
        timeout=timeout,
        ignore=_pattern_list(raw, "ignore"),
        exclude=_pattern_list(raw, "exclude"),
    )


def _pattern_list(raw: dict, key: str) -> list[str]:
    """Read a list of glob patterns; a single string counts as a one-item list."""
    value = raw.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return value
    logger.warning("Invalid %s %r in config, expected a list of patterns", key, value)
    return []


def _find_config_file(
    config_path: Optional[str] = None,
    scan_path: Optional[str] = None,
) -> Optional[str]:
    """Find the config file, returning its path or None."""
    # 1. Explicit path
    if config_path:
        p = Path(config_path)
        if p.is_file():
            return str(p)
        logger.warning("Config file not found: %s", config_path)
        return None

    # 2. Relative to scan path
    if scan_path:
        scan_p = Path(scan_path).absolute()
        if scan_p.is_file():
            scan_p = scan_p.parent
        for directory in (scan_p, *scan_p.parents):
            candidate = directory / DEFAULT_CONFIG_FILENAME
            if candidate.is_file():
                return str(candidate)

    # 3. Current working directory
    cwd_candidate = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if cwd_candidate.is_file():
        return str(cwd_candidate)

    return None
