# -*- coding: utf-8 -*-
"""
Scanner settings from the environment (optionally a .env file).

- QR_MAX_WIDTH / QR_MAX_HEIGHT: preparator bounds (default 1000)
- QR_TRY_HARDER: exhaustive decode search (default true)
- LOGS_DIR, LOG_LEVEL: logging destination and level
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_TRUE = ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < 1:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE


@dataclass(frozen=True)
class ScannerConfig:
    max_width: int = 1000
    max_height: int = 1000
    try_harder: bool = True
    logs_dir: Path = Path("logs")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "ScannerConfig":
        if dotenv:
            load_dotenv()
        return cls(
            max_width=_env_int("QR_MAX_WIDTH", cls.max_width),
            max_height=_env_int("QR_MAX_HEIGHT", cls.max_height),
            try_harder=_env_bool("QR_TRY_HARDER", cls.try_harder),
            logs_dir=Path(os.getenv("LOGS_DIR", str(cls.logs_dir))),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
