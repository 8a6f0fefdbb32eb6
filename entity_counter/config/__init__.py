"""Unified configuration layer for the entity counter.

Merge order (later wins)
------------------------
1. Built-in defaults (``entity_counter.config.defaults``)
2. Optional external config file (JSON or YAML) named by
   ``ENTITY_COUNTER_CONFIG_FILE``
3. Environment variables
4. In-code overrides passed to ``get_counter_config``

External Config File
--------------------
JSON is attempted first, then YAML. Example::

    default_limit: 50
    limits:
      Item: 10
      Tag: null
    poll_interval_seconds: 0.5

Environment Variables
---------------------
``ENTITY_COUNTER_DEFAULT_LIMIT`` (an integer, or ``none``/``unlimited``),
``ENTITY_COUNTER_POLL_INTERVAL_SECONDS``, ``ENTITY_COUNTER_JOIN_TIMEOUT_SECONDS``,
``ENTITY_COUNTER_DB_PATH``.

Public API
----------
* get_counter_config(overrides: dict | None = None) -> CounterSettings
* reset_config_cache() -> None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from ..base.errors import EntityCounterError, ErrorCode
from .settings import CounterSettings

CONFIG_FILE_ENV = "ENTITY_COUNTER_CONFIG_FILE"

ENV_FIELD_MAP = {
    "default_limit": "ENTITY_COUNTER_DEFAULT_LIMIT",
    "poll_interval_seconds": "ENTITY_COUNTER_POLL_INTERVAL_SECONDS",
    "join_timeout_seconds": "ENTITY_COUNTER_JOIN_TIMEOUT_SECONDS",
    "db_path": "ENTITY_COUNTER_DB_PATH",
}

_UNLIMITED_WORDS = {"", "none", "null", "unlimited"}

_FILE_CACHE: Optional[Dict[str, Any]] = None


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    if not path:
        _FILE_CACHE = {}
        return _FILE_CACHE
    p = Path(path).expanduser()
    if not p.exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise EntityCounterError(
                code=ErrorCode.INVALID_CONFIG,
                message=f"Unreadable config file {p}: {e}",
                raw=e,
            ) from e
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE = data
    return data


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field, name in ENV_FIELD_MAP.items():
        val = os.getenv(name)
        if val is None:
            continue
        if field == "default_limit" and val.strip().lower() in _UNLIMITED_WORDS:
            out[field] = None
        else:
            out[field] = val.strip()
    return out


def get_counter_config(overrides: Optional[Dict[str, Any]] = None) -> CounterSettings:
    """Return merged, validated counter settings.

    Raises
    ------
    EntityCounterError
        With ``ErrorCode.INVALID_CONFIG`` when the merged values do not
        validate (for example a non-numeric ``ENTITY_COUNTER_DEFAULT_LIMIT``).
    """
    cfg: Dict[str, Any] = {}
    cfg |= _load_external_config()
    cfg |= _env_overrides()
    if overrides:
        cfg |= overrides
    try:
        return CounterSettings.model_validate(cfg)
    except ValidationError as e:
        raise EntityCounterError(
            code=ErrorCode.INVALID_CONFIG,
            message=f"Invalid entity counter configuration: {e.errors()}",
            raw=e,
        ) from e


def reset_config_cache() -> None:
    """Forget the cached external config file contents."""
    global _FILE_CACHE
    _FILE_CACHE = None


__all__ = [
    "CounterSettings",
    "get_counter_config",
    "reset_config_cache",
    "ENV_FIELD_MAP",
    "CONFIG_FILE_ENV",
]
