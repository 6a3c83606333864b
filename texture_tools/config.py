"""Editor configuration and canvas dimension validation."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping


logger = logging.getLogger(__name__)

DEFAULT_CANVAS_SIZE = 16
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_SHADE_DELTA = 25
DEFAULT_MAX_CANVAS_SIZE = 512
ENV_PREFIX = "TEXTURETOOLS_"


def parse_dimension(
    raw: Any, fallback: int = DEFAULT_CANVAS_SIZE, maximum: int = DEFAULT_MAX_CANVAS_SIZE
) -> int:
    """Turn user-entered canvas size into a positive int.

    Unparseable or non-positive input falls back to ``fallback``; input above
    ``maximum`` is clamped.
    """

    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        logger.debug("parse_dimension fallback raw=%r fallback=%s", raw, fallback)
        return fallback
    if value < 1:
        logger.debug("parse_dimension non-positive raw=%r fallback=%s", raw, fallback)
        return fallback
    return min(value, maximum)


@dataclass(slots=True)
class EditorConfig:
    width: int = DEFAULT_CANVAS_SIZE
    height: int = DEFAULT_CANVAS_SIZE
    history_limit: int = DEFAULT_HISTORY_LIMIT
    shade_delta: int = DEFAULT_SHADE_DELTA
    max_canvas_size: int = DEFAULT_MAX_CANVAS_SIZE
    layer_name_prefix: str = "Layer"

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "EditorConfig":
        defaults = cls()
        max_size = _positive_int(payload.get("max_canvas_size"), defaults.max_canvas_size)
        prefix = str(payload.get("layer_name_prefix", "") or "").strip() or defaults.layer_name_prefix
        return cls(
            width=parse_dimension(payload.get("width"), defaults.width, max_size),
            height=parse_dimension(payload.get("height"), defaults.height, max_size),
            history_limit=_positive_int(payload.get("history_limit"), defaults.history_limit),
            shade_delta=max(0, min(255, _positive_int(payload.get("shade_delta"), defaults.shade_delta))),
            max_canvas_size=max_size,
            layer_name_prefix=prefix,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EditorConfig":
        environ = os.environ if environ is None else environ
        payload: Dict[str, Any] = {}
        for field in fields(cls):
            key = ENV_PREFIX + field.name.upper()
            if key in environ:
                payload[field.name] = environ[key]
        return cls.from_dict(payload)

    def to_dict(self) -> Dict[str, Any]:
        return {field.name: getattr(self, field.name) for field in fields(self)}


def _positive_int(raw: Any, fallback: int) -> int:
    if raw is None:
        return fallback
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


def load_config(path: Path | None) -> tuple[EditorConfig, List[str]]:
    """Read a JSON config file; problems are returned as warnings, never raised."""

    warnings: List[str] = []
    if path is None or not path.exists():
        return EditorConfig(), warnings
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        warnings.append(f"{path.name}: invalid JSON ({exc})")
        return EditorConfig(), warnings
    if not isinstance(payload, dict):
        warnings.append(f"{path.name}: root must be an object")
        return EditorConfig(), warnings
    known = {field.name for field in fields(EditorConfig)}
    for key in sorted(set(payload) - known):
        warnings.append(f"{path.name}: unknown setting {key!r}")
    config = EditorConfig.from_dict(payload)
    logger.debug("Loaded config path=%s values=%s", path, config.to_dict())
    return config, warnings
