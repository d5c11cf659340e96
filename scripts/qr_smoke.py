import sys

from qrscanner import QrScanner
from qrscanner.config import ScannerConfig
from qrscanner.utils import configure_logging, load_image_bytes

if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python scripts/qr_smoke.py <image_path>")
        sys.exit(2)
    config = ScannerConfig.from_env()
    configure_logging(config.logs_dir, config.log_level)

    path = sys.argv[1]
    b = load_image_bytes(path)
    if b is None:
        print(f"Cannot read {path}")
        sys.exit(2)
    with QrScanner(config) as scanner:
        scanner.results.subscribe(lambda r: print("State:", r))
        res = scanner.decode_image_sync(b)
    sys.exit(0 if res.is_success else 1)
