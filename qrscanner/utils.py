# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def configure_logging(logs_dir: Union[str, Path], level: str = "INFO") -> Path:
    """Log to <logs_dir>/app.log and stderr. Returns the log file path."""
    logs_dir = Path(logs_dir)
    ensure_dir(logs_dir)
    log_file = logs_dir / "app.log"
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )
    return log_file


def load_image_bytes(path: Union[str, Path]) -> Optional[bytes]:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError:
        return None
