# -*- coding: utf-8 -*-
"""
Decode orchestrator.

Two entry points write to the same `results` channel:

- decode_from_image(ref): publishes Loading right away, then prepares, binarizes
  and decodes the image on a background worker and publishes Success or Error.
- on_barcode(text): live camera results, published as Success with no Loading.

Whichever publishes last owns the slot. Failures never escape the worker; they
become Error results.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from .binarizer import BinaryBitmap, GlobalHistogramBinarizer, RGBLuminanceSource
from .camera import CameraFrameProcessor, FrameDecoder
from .channel import ResultChannel
from .config import ScannerConfig
from .errors import NotFoundError, PrepareFailure
from .image_source import ImageReference
from .preparator import ImagePreparator
from .reader import DecodeHints, QR_CODE, QrCodeReader
from .results import DecodingResult

logger = logging.getLogger(__name__)

MSG_PREPARE_FAILED = "Failed to decode bitmap"
MSG_NOT_FOUND = "QR code not found"
MSG_CLOSED = "Error: scanner closed"


class QrScanner:
    def __init__(
        self,
        config: Optional[ScannerConfig] = None,
        preparator: Optional[ImagePreparator] = None,
        reader: Optional[QrCodeReader] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        self.config = config or ScannerConfig()
        self.preparator = preparator or ImagePreparator(self.config.max_width, self.config.max_height)
        self.reader = reader or QrCodeReader()
        self.hints = DecodeHints(try_harder=self.config.try_harder, possible_formats=(QR_CODE,))
        # One worker: image decodes run one at a time, in request order.
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="qr-decode")
        self.results = ResultChannel()

    # -----------------------------
    # Gallery / file path
    # -----------------------------

    def decode_from_image(self, ref: ImageReference) -> "Future[DecodingResult]":
        if self.results.closed:
            return self._closed_future()
        self.results.publish(DecodingResult.loading())
        try:
            return self._executor.submit(self._decode, ref)
        except RuntimeError:
            # close() won the race against this request.
            return self._closed_future()

    @staticmethod
    def _closed_future() -> "Future[DecodingResult]":
        logger.debug("Scanner closed, ignoring decode request")
        done: "Future[DecodingResult]" = Future()
        done.set_result(DecodingResult.error(MSG_CLOSED))
        return done

    def decode_image_sync(self, ref: ImageReference) -> DecodingResult:
        """Run the pipeline in the calling thread (scripts, tests); still publishes."""
        self.results.publish(DecodingResult.loading())
        return self._decode(ref)

    def _decode(self, ref: ImageReference) -> DecodingResult:
        try:
            raster = self.preparator.prepare(ref)
            source = RGBLuminanceSource(raster.width, raster.height, raster.get_pixels())
            bitmap = BinaryBitmap(GlobalHistogramBinarizer(source))
            text = self.reader.decode(bitmap, self.hints)
        except PrepareFailure as e:
            logger.warning("Image preparation failed (%s)", e.reason)
            result = DecodingResult.error(MSG_PREPARE_FAILED)
        except NotFoundError:
            logger.warning("No QR code in image")
            result = DecodingResult.error(MSG_NOT_FOUND)
        except Exception as e:
            logger.warning("Unexpected decode failure", exc_info=True)
            result = DecodingResult.error(f"Error: {str(e) or type(e).__name__}")
        else:
            logger.info("QR decoded from image: %r", text[:80])
            result = DecodingResult.success(text)
        self.results.publish(result)
        return result

    # -----------------------------
    # Live camera path
    # -----------------------------

    def on_barcode(self, text: str) -> None:
        self.results.publish(DecodingResult.success(text))

    def camera_processor(self, decoder: Optional[FrameDecoder] = None) -> CameraFrameProcessor:
        return CameraFrameProcessor(self.on_barcode, decoder)

    # -----------------------------
    # Lifecycle
    # -----------------------------

    def close(self) -> None:
        """Detach consumers; in-flight work keeps running but its result is dropped.

        Later decode_from_image calls return an already resolved future.
        """
        self.results.close()
        self._executor.shutdown(wait=False)

    def __enter__(self) -> "QrScanner":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
