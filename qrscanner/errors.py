# -*- coding: utf-8 -*-
from __future__ import annotations


class ScannerError(Exception):
    """Base class for decode pipeline failures."""


class PrepareFailure(ScannerError):
    """The image could not be read or decoded into a raster at any scale."""

    def __init__(self, reason: str = "decode-bounds") -> None:
        super().__init__(reason)
        self.reason = reason


class NotFoundError(ScannerError):
    """The image was readable but no symbol was located."""
