# -*- coding: utf-8 -*-
"""
Image sources for the preparator.

Each call re-opens the underlying resource and closes it before returning:
- open_for_bounds_only() reads the header only (Pillow opens lazily),
- open_scaled(factor) decodes at 1/factor of the declared size. Only JPEG skips
  the full resolution raster (DCT draft mode); Pillow has no scaled decode for
  other formats, so those are loaded at full size and then reduced.
"""
from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Protocol, Union

import numpy as np  # type: ignore
from PIL import Image

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageDimensions:
    width: int
    height: int


@dataclass
class Raster:
    """Decoded RGB pixels (height x width x 3, uint8) at the scaled resolution."""
    width: int
    height: int
    rgb: np.ndarray

    @classmethod
    def from_image(cls, img: Image.Image) -> "Raster":
        rgb = np.asarray(img.convert("RGB"), dtype=np.uint8)
        h, w = rgb.shape[:2]
        return cls(width=w, height=h, rgb=rgb)

    def get_pixels(self) -> np.ndarray:
        """Flat row-major ARGB buffer (0xAARRGGBB as uint32), alpha always opaque."""
        px = self.rgb.reshape(-1, 3).astype(np.uint32)
        return (np.uint32(0xFF000000) | (px[:, 0] << 16) | (px[:, 1] << 8) | px[:, 2]).astype(np.uint32)


class ImageSource(Protocol):
    def open_for_bounds_only(self) -> ImageDimensions: ...

    def open_scaled(self, factor: int) -> Optional[Raster]: ...


class _StreamImageSource:
    """Shared Pillow logic; subclasses supply a fresh binary stream per open."""

    def _open_stream(self) -> BinaryIO:
        raise NotImplementedError

    def open_for_bounds_only(self) -> ImageDimensions:
        with self._open_stream() as fh, Image.open(fh) as img:
            w, h = img.size
        return ImageDimensions(width=w, height=h)

    def open_scaled(self, factor: int) -> Optional[Raster]:
        if factor < 1:
            raise ValueError(f"scale factor must be >= 1, got {factor}")
        with self._open_stream() as fh, Image.open(fh) as img:
            w, h = img.size
            target = (max(1, w // factor), max(1, h // factor))
            if factor > 1:
                # Only JPEG honours draft; every other format loads at full size below.
                img.draft("RGB", target)
            rgb = img.convert("RGB")
        # Whatever the draft mode did not cover (PNG, GIF, BMP...).
        rest = (rgb.size[0] // target[0], rgb.size[1] // target[1])
        if rest[0] > 1 or rest[1] > 1:
            rgb = rgb.reduce((max(1, rest[0]), max(1, rest[1])))
        logger.debug("Decoded %dx%d raster at 1/%d", rgb.size[0], rgb.size[1], factor)
        return Raster.from_image(rgb)


class FileImageSource(_StreamImageSource):
    def __init__(self, path: Union[str, os.PathLike]) -> None:
        self.path = Path(path)

    def _open_stream(self) -> BinaryIO:
        return open(self.path, "rb")

    def __repr__(self) -> str:
        return f"FileImageSource({str(self.path)!r})"


class BytesImageSource(_StreamImageSource):
    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)

    def _open_stream(self) -> BinaryIO:
        return io.BytesIO(self.data)

    def __repr__(self) -> str:
        return f"BytesImageSource(<{len(self.data)} bytes>)"


ImageReference = Union[str, os.PathLike, bytes, bytearray, memoryview, ImageSource]


def open_image_source(ref: ImageReference) -> ImageSource:
    """Wrap a path, raw bytes, or an existing ImageSource."""
    if isinstance(ref, (bytes, bytearray, memoryview)):
        return BytesImageSource(bytes(ref))
    if isinstance(ref, (str, os.PathLike)):
        return FileImageSource(ref)
    if callable(getattr(ref, "open_for_bounds_only", None)) and callable(getattr(ref, "open_scaled", None)):
        return ref
    raise TypeError(f"unsupported image reference: {type(ref).__name__}")
