#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Streamlit app: QR scanner
- Live camera scan (WebRTC), every decoded frame shows up immediately
- Or pick an image: downscaled, binarized and decoded in the background
Run: streamlit run app.py
"""
from __future__ import annotations

import logging

import streamlit as st

from qrscanner import QrScanner
from qrscanner.config import ScannerConfig
from qrscanner.utils import configure_logging

# Optional live scanner (WebRTC)
try:
    import av  # noqa: F401  # ensure wheel present
    from streamlit_webrtc import webrtc_streamer, WebRtcMode, VideoProcessorBase
    CAMERA_ENABLED = True
except ImportError:
    CAMERA_ENABLED = False

APP_NAME = "QR Scanner"

# --- Boot ---
CONFIG = ScannerConfig.from_env()
configure_logging(CONFIG.logs_dir, CONFIG.log_level)
logger = logging.getLogger("app")

st.set_page_config(page_title=APP_NAME, page_icon="📷", layout="centered")


def _get_scanner() -> QrScanner:
    if "scanner" not in st.session_state:
        st.session_state["scanner"] = QrScanner(CONFIG)
        logger.info("Scanner created for session")
    return st.session_state["scanner"]


scanner = _get_scanner()

st.title("Scanner un QR")

if not CAMERA_ENABLED:
    st.warning("Le scanner live nécessite des paquets supplémentaires. "
               "Installez: streamlit-webrtc, av. "
               "Vous pouvez sinon **importer une photo** du QR ci-dessous.")
else:
    class QrVideoProcessor(VideoProcessorBase):  # type: ignore[misc]
        def __init__(self) -> None:
            self.frames = scanner.camera_processor()

        def recv(self, frame):
            self.frames.process(frame)
            return frame

    webrtc_streamer(
        key="qr-scan",
        mode=WebRtcMode.SENDRECV,
        media_stream_constraints={"video": True, "audio": False},
        video_processor_factory=QrVideoProcessor,
        async_processing=True,
    )

st.subheader("Ou importer une image avec un QR")
img_file = st.file_uploader("Image (photo du QR, PNG/JPG)", type=["png", "jpg", "jpeg", "webp", "bmp"])
if img_file is not None and st.session_state.get("decoded_file_id") != img_file.file_id:
    st.session_state["decoded_file_id"] = img_file.file_id
    future = scanner.decode_from_image(img_file.getvalue())
    with st.spinner("Reconnaissance en cours…"):
        future.result()

st.button("Rafraîchir")

result = scanner.results.value
if result is None:
    st.caption("Aucun QR scanné pour le moment.")
elif result.is_loading:
    st.info("Reconnaissance en cours…")
elif result.is_error:
    st.error(f"Impossible de décoder un QR : {result.message}")
else:
    st.success("QR détecté ✔")
    st.code(result.text, language="text")
