from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from split_core.roster import DEFAULT_MEMBER_COUNT


@dataclass(frozen=True)
class RuntimeConfig:
    default_members: int
    export_root: Path


def load_env(dotenv_path: str | Path | None = None) -> None:
    path = Path(dotenv_path) if dotenv_path else None
    if path and path.exists():
        load_dotenv(path)
        return
    load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


def runtime_config() -> RuntimeConfig:
    default_members = _env_int("HOURS_SPLIT_DEFAULT_MEMBERS", DEFAULT_MEMBER_COUNT)
    export_root = Path(os.getenv("HOURS_SPLIT_EXPORT_DIR", "./exports")).expanduser().resolve()
    return RuntimeConfig(default_members=default_members, export_root=export_root)


def export_root(cfg: RuntimeConfig) -> Path:
    cfg.export_root.mkdir(parents=True, exist_ok=True)
    return cfg.export_root
