from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml


def load_yaml(path: str, allowed_keys: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """Read a YAML mapping; with `allowed_keys`, unknown top-level keys are rejected."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the root of {path}, got {type(data).__name__}")
    if allowed_keys is not None:
        allowed = set(allowed_keys)
        unknown = sorted(str(k) for k in data if k not in allowed)
        if unknown:
            raise ValueError(f"Unknown keys in {path}: {', '.join(unknown)}")
    return data


def resolve_path(path: str, base_dir: Optional[str] = None) -> str:
    p = Path(os.path.expanduser(path))
    if p.is_absolute():
        return str(p)
    return str((Path(base_dir or os.getcwd()) / p).resolve())


def positive_float(value: Any, name: str) -> float:
    v = float(value)
    if not v > 0.0:
        raise ValueError(f"{name} must be positive, got {value}")
    return v
