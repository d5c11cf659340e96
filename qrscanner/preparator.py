# -*- coding: utf-8 -*-
"""
Prepare an arbitrary user image for the barcode decoder.

1) read declared dimensions only,
2) pick the largest power-of-two downscale that keeps the image no smaller than
   the requested bounds (may still exceed them by up to 2x, on purpose),
3) decode directly at that scale.
"""
from __future__ import annotations

import logging
import struct

from PIL import Image

from .errors import PrepareFailure
from .image_source import ImageReference, Raster, open_image_source

logger = logging.getLogger(__name__)

DEFAULT_MAX_WIDTH = 1000
DEFAULT_MAX_HEIGHT = 1000

# Image.open / load failures that mean "not a usable image". Pillow reports
# broken PNG chunks as SyntaxError and truncated headers as EOFError or struct.error.
_UNREADABLE = (OSError, ValueError, SyntaxError, EOFError, struct.error, Image.DecompressionBombError)


def compute_sample_size(width: int, height: int, max_width: int, max_height: int) -> int:
    """Largest power of two such that half the image, scaled, still reaches both bounds."""
    sample_size = 1
    if height > max_height or width > max_width:
        half_height = height // 2
        half_width = width // 2
        while half_height // sample_size >= max_height and half_width // sample_size >= max_width:
            sample_size *= 2
    return sample_size


class ImagePreparator:
    """Stateless across calls; one instance can serve any number of decodes."""

    def __init__(self, max_width: int = DEFAULT_MAX_WIDTH, max_height: int = DEFAULT_MAX_HEIGHT) -> None:
        if max_width < 1 or max_height < 1:
            raise ValueError(f"bounds must be positive, got {max_width}x{max_height}")
        self.max_width = max_width
        self.max_height = max_height

    def prepare(self, ref: ImageReference) -> Raster:
        try:
            source = open_image_source(ref)
        except TypeError as e:
            raise PrepareFailure("unsupported-reference") from e
        try:
            dims = source.open_for_bounds_only()
        except _UNREADABLE as e:
            logger.debug("Cannot read bounds of %r: %s", source, e)
            raise PrepareFailure("decode-bounds") from e

        factor = compute_sample_size(dims.width, dims.height, self.max_width, self.max_height)
        logger.debug("Image %dx%d -> sample size %d", dims.width, dims.height, factor)

        try:
            raster = source.open_scaled(factor)
        except _UNREADABLE as e:
            logger.debug("Cannot decode %r at 1/%d: %s", source, factor, e)
            raise PrepareFailure("decode-bounds") from e
        if raster is None:
            raise PrepareFailure("decode-bounds")
        return raster


def prepare(ref: ImageReference, max_width: int = DEFAULT_MAX_WIDTH,
            max_height: int = DEFAULT_MAX_HEIGHT) -> Raster:
    return ImagePreparator(max_width, max_height).prepare(ref)
