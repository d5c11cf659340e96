import io
from pathlib import Path

import numpy as np
import pytest
import qrcode
from PIL import Image


def make_qr_image(text: str, box_size: int = 10) -> Image.Image:
    qr = qrcode.QRCode(box_size=box_size, border=4)
    qr.add_data(text)
    qr.make(fit=True)
    return qr.make_image(fill_color="black", back_color="white").convert("RGB")


def to_bytes(img: Image.Image, fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def hello_png(tmp_path: Path) -> Path:
    path = tmp_path / "hello.png"
    make_qr_image("HELLO").save(path)
    return path


@pytest.fixture
def stripes_png(tmp_path: Path) -> Path:
    # Two clear luminance peaks, no symbol.
    arr = np.full((300, 300, 3), 255, dtype=np.uint8)
    arr[:, ::20] = 0
    arr[:, 1::20] = 0
    path = tmp_path / "stripes.png"
    Image.fromarray(arr).save(path)
    return path
