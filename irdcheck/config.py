from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CFG: dict[str, Any] = {
    "export_normalized": False,
    "show_only_invalid": False,
}


def _merge(defaults: dict[str, Any], data: dict[str, Any]) -> dict[str, Any]:
    """Known keys only; a value of the wrong type keeps its default."""
    merged = defaults.copy()
    for key, default in defaults.items():
        if key not in data:
            continue
        value = data[key]
        if type(value) is not type(default):
            logger.warning("config %s: expected %s, got %r", key, type(default).__name__, value)
            continue
        merged[key] = value
    return merged


def load_cfg(path: Path, defaults: dict[str, Any] = DEFAULT_CFG) -> dict[str, Any]:
    if not path.exists():
        return defaults.copy()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("ignoring unreadable config %s: %s", path, e)
        return defaults.copy()
    if not isinstance(data, dict):
        logger.warning("ignoring config %s: not a JSON object", path)
        return defaults.copy()
    return _merge(defaults, data)


def save_cfg(path: Path, cfg: dict[str, Any]) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(cfg, indent=2, sort_keys=True), encoding="utf-8")
    except OSError as e:
        # best-effort; don't crash the UI on FS errors
        logger.warning("could not save config %s: %s", path, e)
