"""
Shared handling of the per-algorithm `config` dict.

Each algorithm declares its defaults; callers may pass None, an empty dict, or a
dict overriding a subset of those keys. Unknown keys are an error so typos in
experiment YAML files fail loudly instead of being ignored.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


def merge_config(
    algo: str, config: Optional[Dict[str, Any]], defaults: Dict[str, Any]
) -> Dict[str, Any]:
    if config is None:
        return dict(defaults)
    if not isinstance(config, dict):
        raise ValueError(f"{algo}: config must be a dict or None; got {type(config).__name__}")
    unknown = sorted(set(config) - set(defaults))
    if unknown:
        raise ValueError(f"{algo}: unknown config keys {unknown}. Supported: {sorted(defaults)}")
    merged = dict(defaults)
    merged.update(config)
    return merged
