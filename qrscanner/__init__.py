# -*- coding: utf-8 -*-
"""
QR scanner core.

- Image preparation (bounded power-of-two downscale, luminance, global histogram
  binarization) for user-supplied images.
- A decode orchestrator publishing Loading / Success / Error to one observable slot.
- A live camera path mapping decoded frames straight to Success.
"""
from __future__ import annotations

from .channel import ResultChannel, Subscription
from .errors import NotFoundError, PrepareFailure, ScannerError
from .results import DecodingResult, ResultKind
from .scanner import QrScanner

__version__ = "0.1.0"

__all__ = [
    "DecodingResult",
    "NotFoundError",
    "PrepareFailure",
    "QrScanner",
    "ResultChannel",
    "ResultKind",
    "ScannerError",
    "Subscription",
]
