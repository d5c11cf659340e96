# -*- coding: utf-8 -*-
"""
Live camera path.

Frames arrive continuously (a webrtc stream in the app). Each frame that holds a
readable QR code yields its text; frames without one produce nothing.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import cv2  # type: ignore
import numpy as np  # type: ignore

logger = logging.getLogger(__name__)


class FrameDecoder:
    def __init__(self) -> None:
        self.detector = cv2.QRCodeDetector()

    def decode(self, frame_bgr: np.ndarray) -> Optional[str]:
        if frame_bgr is None or frame_bgr.size == 0:
            return None
        try:
            data, _points, _ = self.detector.detectAndDecode(frame_bgr)
        except cv2.error as e:
            logger.debug("OpenCV detect error on frame: %s", e)
            return None
        data = (data or "").strip()
        return data or None


def _to_bgr(frame: Any) -> np.ndarray:
    # PyAV VideoFrame (streamlit-webrtc) or a plain ndarray.
    if hasattr(frame, "to_ndarray"):
        return frame.to_ndarray(format="bgr24")
    arr = np.asarray(frame)
    if arr.dtype != np.uint8:
        arr = arr.astype(np.uint8, copy=False)
    if arr.ndim == 2:
        arr = cv2.cvtColor(arr, cv2.COLOR_GRAY2BGR)
    return arr


class CameraFrameProcessor:
    """Feeds frames to a decoder and reports each decoded text to `on_barcode`."""

    def __init__(self, on_barcode: Callable[[str], None], decoder: Optional[FrameDecoder] = None) -> None:
        self.on_barcode = on_barcode
        self.decoder = decoder or FrameDecoder()
        self.last_result: Optional[str] = None

    def process(self, frame: Any) -> Optional[str]:
        text = self.decoder.decode(_to_bgr(frame))
        if text is None:
            return None
        self.last_result = text
        self.on_barcode(text)
        return text
