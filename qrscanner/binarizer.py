# -*- coding: utf-8 -*-
"""
Luminance conversion and global histogram binarization.

The binarizer picks a single black point for the whole image from a 32-bucket
histogram of four sampled rows. It is fast and suits photographed or gallery
images; it is not meant for unevenly lit live frames.
"""
from __future__ import annotations

import numpy as np  # type: ignore

from .errors import NotFoundError

LUMINANCE_BITS = 5
LUMINANCE_SHIFT = 8 - LUMINANCE_BITS
LUMINANCE_BUCKETS = 1 << LUMINANCE_BITS


class RGBLuminanceSource:
    """Per-pixel brightness from a flat ARGB buffer: (r + 2g + b) / 4."""

    def __init__(self, width: int, height: int, pixels: np.ndarray) -> None:
        pixels = np.asarray(pixels, dtype=np.uint32).reshape(-1)
        if pixels.size != width * height:
            raise ValueError(f"expected {width * height} pixels, got {pixels.size}")
        self.width = width
        self.height = height
        r = (pixels >> 16) & 0xFF
        g2 = (pixels >> 7) & 0x1FE
        b = pixels & 0xFF
        self._luminances = ((r + g2 + b) // 4).astype(np.uint8).reshape(height, width)

    def get_row(self, y: int) -> np.ndarray:
        if not 0 <= y < self.height:
            raise ValueError(f"requested row is outside the image: {y}")
        return self._luminances[y]

    def get_matrix(self) -> np.ndarray:
        return self._luminances


def estimate_black_point(buckets: np.ndarray) -> int:
    buckets = [int(c) for c in buckets]
    num_buckets = len(buckets)

    first_peak = 0
    first_peak_size = 0
    max_bucket_count = 0
    for x, count in enumerate(buckets):
        if count > first_peak_size:
            first_peak = x
            first_peak_size = count
        if count > max_bucket_count:
            max_bucket_count = count

    # Second peak: far from the first one and still tall.
    second_peak = 0
    second_peak_score = 0
    for x, count in enumerate(buckets):
        distance = x - first_peak
        score = count * distance * distance
        if score > second_peak_score:
            second_peak = x
            second_peak_score = score

    if first_peak > second_peak:
        first_peak, second_peak = second_peak, first_peak

    if second_peak - first_peak <= num_buckets // 16:
        raise NotFoundError("luminance histogram has a single peak")

    best_valley = second_peak - 1
    best_valley_score = -1
    for x in range(second_peak - 1, first_peak, -1):
        from_first = x - first_peak
        score = from_first * from_first * (second_peak - x) * (max_bucket_count - buckets[x])
        if score > best_valley_score:
            best_valley = x
            best_valley_score = score

    return best_valley << LUMINANCE_SHIFT


class GlobalHistogramBinarizer:
    def __init__(self, source: RGBLuminanceSource) -> None:
        self.source = source

    def _sample_histogram(self) -> np.ndarray:
        width, height = self.source.width, self.source.height
        buckets = np.zeros(LUMINANCE_BUCKETS, dtype=np.int64)
        left, right = width // 5, (width * 4) // 5
        for y in range(1, 5):
            row = self.source.get_row(height * y // 5)
            buckets += np.bincount(row[left:right] >> LUMINANCE_SHIFT, minlength=LUMINANCE_BUCKETS)
        return buckets

    def black_point(self) -> int:
        return estimate_black_point(self._sample_histogram())

    def get_black_matrix(self) -> np.ndarray:
        """Boolean matrix, True where the pixel is black."""
        return self.source.get_matrix() < self.black_point()


class BinaryBitmap:
    def __init__(self, binarizer: GlobalHistogramBinarizer) -> None:
        self.binarizer = binarizer
        self._matrix = None

    @property
    def width(self) -> int:
        return self.binarizer.source.width

    @property
    def height(self) -> int:
        return self.binarizer.source.height

    def get_black_matrix(self) -> np.ndarray:
        if self._matrix is None:
            self._matrix = self.binarizer.get_black_matrix()
        return self._matrix

    def to_image(self) -> np.ndarray:
        """8-bit grayscale view: black pixels 0, white pixels 255."""
        return np.where(self.get_black_matrix(), 0, 255).astype(np.uint8)
