# -*- coding: utf-8 -*-
"""
Decode primitive: a binarized bitmap in, symbol text out.

Backed by ZXing (zxing-cpp). The bitmap is already thresholded, so the engine is
told to take pixels as they are instead of running its own binarizer.
"""
from __future__ import annotations

import functools
import logging
import operator
from dataclasses import dataclass
from typing import Tuple

import numpy as np  # type: ignore
import zxingcpp  # type: ignore

from .binarizer import BinaryBitmap
from .errors import NotFoundError

logger = logging.getLogger(__name__)

QR_CODE = "QRCode"


@dataclass(frozen=True)
class DecodeHints:
    """try_harder trades latency for a more exhaustive search (rotations, downscales).

    possible_formats holds zxing-cpp format names, e.g. "QRCode", "EAN13".
    """
    try_harder: bool = True
    possible_formats: Tuple[str, ...] = (QR_CODE,)


def _formats(names: Tuple[str, ...]):
    if not names:
        raise ValueError("at least one barcode format is required")
    try:
        fmts = [getattr(zxingcpp.BarcodeFormat, name) for name in names]
    except AttributeError as e:
        raise ValueError(f"unknown barcode format in {names!r}") from e
    return functools.reduce(operator.or_, fmts)


class QrCodeReader:
    def decode(self, bitmap: BinaryBitmap, hints: DecodeHints = DecodeHints()) -> str:
        image = np.ascontiguousarray(bitmap.to_image())
        results = zxingcpp.read_barcodes(
            image,
            formats=_formats(hints.possible_formats),
            try_rotate=hints.try_harder,
            try_downscale=hints.try_harder,
            binarizer=zxingcpp.Binarizer.FixedThreshold,
        )
        for res in results:
            if res.text:
                logger.debug("ZXing decoded %s (%d chars)", res.format, len(res.text))
                return res.text
        raise NotFoundError("no barcode found")
