#!/usr/bin/env python3
"""
config.py
=========
World generation parameters.

Every system receives the same ``params`` dict (uppercase keys, as in
:data:`DEFAULT_PARAMS`). Build one with :func:`make_params`; values can also
be overridden through ``ROAD_WEAVER_<KEY>`` environment variables via
:func:`params_from_env`. This module is an import-safe leaf apart from
:mod:`errors`.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

from errors import ConfigError

ENV_PREFIX = "ROAD_WEAVER_"

DEFAULT_PARAMS: Dict[str, float] = {
    # ── Geometry (world units) ───────────────────────────────────────────
    "ROAD_WIDTH": 100,
    "ROUNDNESS": 3,
    "BUILDING_WIDTH": 150,
    "BUILDING_MIN_LENGTH": 150,
    "SPACING": 50,
    "TREE_SIZE": 100,
    # ── Signals (ticks) ──────────────────────────────────────────────────
    "GREEN_DURATION": 2,
    "YELLOW_DURATION": 1,
}

# keys that must be whole numbers
_INT_KEYS = {"ROUNDNESS", "GREEN_DURATION", "YELLOW_DURATION"}
# keys that must be > 0 (the rest only >= 0)
_POSITIVE_KEYS = {"ROAD_WIDTH", "GREEN_DURATION", "YELLOW_DURATION"}

# camelCase record key <-> param key
PARAM_RECORD_KEYS: Dict[str, str] = {
    "roadWidth": "ROAD_WIDTH",
    "roundness": "ROUNDNESS",
    "buildingWidth": "BUILDING_WIDTH",
    "buildingMinLength": "BUILDING_MIN_LENGTH",
    "spacing": "SPACING",
    "treeSize": "TREE_SIZE",
    "greenDuration": "GREEN_DURATION",
    "yellowDuration": "YELLOW_DURATION",
}


def _coerce(key: str, value: Any):
    if isinstance(value, bool):
        raise ConfigError(f"{key}: expected a number, got {value!r}")
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key}: expected a number, got {value!r}") from None
    if key in _INT_KEYS:
        if num != int(num):
            raise ConfigError(f"{key}: expected a whole number, got {value!r}")
        num = int(num)
    if key in _POSITIVE_KEYS and num <= 0:
        raise ConfigError(f"{key}: must be > 0, got {value!r}")
    if num < 0:
        raise ConfigError(f"{key}: must be >= 0, got {value!r}")
    return num


def make_params(overrides: Optional[Mapping[str, Any]] = None, **kwargs) -> Dict[str, float]:
    """Return a validated copy of :data:`DEFAULT_PARAMS` with overrides applied.

    Keys are case-insensitive (``road_width`` and ``ROAD_WIDTH`` both work).
    """
    params = dict(DEFAULT_PARAMS)
    merged = dict(overrides or {})
    merged.update(kwargs)
    for key, value in merged.items():
        k = key.upper()
        if k not in DEFAULT_PARAMS:
            raise ConfigError(f"unknown parameter {key!r}")
        params[k] = _coerce(k, value)
    # buildings are laid out in steps of min length + spacing
    if params["BUILDING_MIN_LENGTH"] + params["SPACING"] <= 0:
        raise ConfigError("BUILDING_MIN_LENGTH + SPACING: must be > 0")
    return params


def params_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Collect ``ROAD_WEAVER_<KEY>`` overrides. Values are validated later by
    :func:`make_params`."""
    env = os.environ if environ is None else environ
    out = {}
    for key in DEFAULT_PARAMS:
        raw = env.get(ENV_PREFIX + key)
        if raw is not None and raw.strip() != "":
            out[key] = raw.strip()
    return out


def params_to_record(params: Mapping[str, Any]) -> Dict[str, Any]:
    return {rk: params[pk] for rk, pk in PARAM_RECORD_KEYS.items()}


def params_from_record(data: Mapping[str, Any]) -> Dict[str, float]:
    return make_params({pk: data[rk] for rk, pk in PARAM_RECORD_KEYS.items() if rk in data})
