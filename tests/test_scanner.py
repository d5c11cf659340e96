import random
import threading
from pathlib import Path

import pytest

from qrscanner import DecodingResult, QrScanner, ResultKind
from qrscanner.config import ScannerConfig
from qrscanner.errors import NotFoundError

from conftest import make_qr_image, to_bytes


class Recorder:
    def __init__(self):
        self.lock = threading.Lock()
        self.items = []

    def __call__(self, result):
        with self.lock:
            self.items.append(result)

    @property
    def kinds(self):
        return [r.kind for r in self.items]


@pytest.fixture
def scanner():
    s = QrScanner()
    yield s
    s.close()


def _run(scanner, ref):
    rec = Recorder()
    scanner.results.subscribe(rec)
    result = scanner.decode_from_image(ref).result(timeout=30)
    return rec, result


def test_decodes_hello(scanner, hello_png: Path):
    rec, result = _run(scanner, str(hello_png))
    assert result == DecodingResult.success("HELLO")
    assert rec.kinds == [ResultKind.LOADING, ResultKind.SUCCESS]
    assert scanner.results.value.text == "HELLO"


def test_decodes_large_jpeg_after_downscale(scanner):
    data = to_bytes(make_qr_image("https://example.com/large", box_size=80), "JPEG")
    _, result = _run(scanner, data)
    assert result == DecodingResult.success("https://example.com/large")


def test_no_qr_in_image(scanner, stripes_png: Path):
    rec, result = _run(scanner, stripes_png)
    assert result == DecodingResult.error("QR code not found")
    assert rec.kinds == [ResultKind.LOADING, ResultKind.ERROR]


def test_corrupt_image(scanner):
    rec, result = _run(scanner, b"\x89PNG garbage")
    assert result == DecodingResult.error("Failed to decode bitmap")
    assert rec.kinds == [ResultKind.LOADING, ResultKind.ERROR]


def test_broken_png_chunk(scanner, hello_png: Path):
    data = hello_png.read_bytes().replace(b"IEND", b"\x00END")
    rec, result = _run(scanner, data)
    assert result == DecodingResult.error("Failed to decode bitmap")
    assert rec.kinds == [ResultKind.LOADING, ResultKind.ERROR]


def test_damaged_png_never_leaks_raw_exception(scanner, hello_png: Path):
    original = hello_png.read_bytes()
    rng = random.Random(1234)
    allowed = {"Failed to decode bitmap", "QR code not found"}
    for _ in range(20):
        data = bytearray(original)
        for _ in range(4):
            i = rng.randrange(len(data) // 2, len(data))
            data[i] ^= 0xFF
        result = scanner.decode_from_image(bytes(data)).result(timeout=30)
        assert result.is_success or result.message in allowed


def test_missing_file(scanner, tmp_path: Path):
    _, result = _run(scanner, tmp_path / "missing.jpg")
    assert result.message == "Failed to decode bitmap"


def test_unsupported_reference(scanner):
    rec, result = _run(scanner, None)
    assert result == DecodingResult.error("Failed to decode bitmap")
    assert rec.kinds == [ResultKind.LOADING, ResultKind.ERROR]


class ExplodingReader:
    def __init__(self, exc):
        self.exc = exc

    def decode(self, bitmap, hints):
        raise self.exc


def test_other_failure_message(hello_png: Path):
    with QrScanner(reader=ExplodingReader(RuntimeError("boom"))) as s:
        _, result = _run(s, hello_png)
    assert result == DecodingResult.error("Error: boom")


def test_other_failure_without_message(hello_png: Path):
    with QrScanner(reader=ExplodingReader(KeyError())) as s:
        _, result = _run(s, hello_png)
    assert result == DecodingResult.error("Error: KeyError")


def test_reader_not_found_maps_to_not_found(hello_png: Path):
    with QrScanner(reader=ExplodingReader(NotFoundError())) as s:
        _, result = _run(s, hello_png)
    assert result.message == "QR code not found"


def test_reader_gets_qr_only_try_harder_hints(hello_png: Path):
    seen = {}

    class SpyReader:
        def decode(self, bitmap, hints):
            seen["hints"] = hints
            return "spy"

    with QrScanner(ScannerConfig(try_harder=True), reader=SpyReader()) as s:
        _run(s, hello_png)
    assert seen["hints"].try_harder is True
    assert seen["hints"].possible_formats == ("QRCode",)


def test_two_rapid_calls_last_wins(scanner, hello_png: Path, stripes_png: Path):
    rec = Recorder()
    scanner.results.subscribe(rec)
    first = scanner.decode_from_image(hello_png)
    second = scanner.decode_from_image(stripes_png)
    first.result(timeout=30)
    second.result(timeout=30)
    assert rec.kinds[0] == ResultKind.LOADING
    assert rec.kinds.count(ResultKind.LOADING) == 2
    assert DecodingResult.success("HELLO") in rec.items
    assert rec.items[-1] == DecodingResult.error("QR code not found")
    assert scanner.results.value == DecodingResult.error("QR code not found")


def test_camera_result_has_no_loading(scanner):
    rec = Recorder()
    scanner.results.subscribe(rec)
    scanner.on_barcode("from-camera")
    assert rec.items == [DecodingResult.success("from-camera")]


def test_closed_scanner_drops_late_result(hello_png: Path):
    gate = threading.Event()

    class SlowReader:
        def decode(self, bitmap, hints):
            gate.wait(10)
            return "late"

    s = QrScanner(reader=SlowReader())
    rec = Recorder()
    s.results.subscribe(rec)
    future = s.decode_from_image(hello_png)
    s.close()
    gate.set()
    assert future.result(timeout=30) == DecodingResult.success("late")
    assert rec.kinds == [ResultKind.LOADING]
    assert s.results.value.is_loading


def test_sync_decode_publishes(hello_png: Path):
    with QrScanner() as s:
        rec = Recorder()
        s.results.subscribe(rec)
        result = s.decode_image_sync(hello_png.read_bytes())
    assert result.is_success
    assert rec.kinds == [ResultKind.LOADING, ResultKind.SUCCESS]


def test_decode_after_close_resolves_without_raising():
    s = QrScanner()
    s.close()
    future = s.decode_from_image(b"anything")
    assert future.done()
    assert future.result() == DecodingResult.error("Error: scanner closed")
    assert s.results.value is None
