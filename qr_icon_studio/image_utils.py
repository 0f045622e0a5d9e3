"""Image I/O helpers: icon decoding, PNG export and scannability checks."""

import io
import os
import threading
from concurrent.futures import Future
from enum import Enum

from PIL import Image


class VerifyResult(Enum):
    """Outcome of decoding an exported PNG back to text."""
    SCANNABLE = "scannable"
    NOT_SCANNABLE = "not_scannable"
    SKIPPED = "skipped"  # no zbar decoder available


def load_icon(path: str) -> Image.Image:
    """Load an icon image from disk.

    Args:
        path: Path to the image file.

    Returns:
        Fully decoded PIL Image in RGBA mode, any dimensions.

    Raises:
        FileNotFoundError: If the image file doesn't exist.
        ValueError: If the file is not a valid image.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Image not found: {path}")

    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except (OSError, SyntaxError) as e:
        raise ValueError(f"Could not open image '{path}': {e}")


def load_icon_async(path: str) -> "Future[Image.Image]":
    """Decode an icon on a worker thread.

    The returned future completes exactly once, with the image or with the
    exception ``load_icon`` raised. It cannot be cancelled once started.
    """
    future: Future = Future()
    future.set_running_or_notify_cancel()

    def _run():
        try:
            future.set_result(load_icon(path))
        except Exception as e:
            future.set_exception(e)

    thread = threading.Thread(target=_run, daemon=True)
    thread.start()
    return future


def center_crop_square(img: Image.Image) -> Image.Image:
    """Cut the middle square out of a non-square icon.

    The compositor clips icons to a circle; cropping first keeps a wide or
    tall logo from being squashed into it. Odd leftovers go to the right and
    bottom edges.
    """
    width, height = img.size
    if width == height:
        return img

    side = min(width, height)
    left = (width - side) // 2
    top = (height - side) // 2
    return img.crop((left, top, left + side, top + side))


def encode_png(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, "PNG")
    return buf.getvalue()


def save_png(data: bytes, output_path: str) -> str:
    """Write PNG bytes to ``output_path``, creating parent directories."""
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    with open(output_path, "wb") as f:
        f.write(data)
    return output_path


def verify_qr_scannable(image_path: str) -> tuple[VerifyResult, str | None]:
    """Attempt to decode a QR code from the exported image.

    Uses pyzbar if available, otherwise returns SKIPPED.

    Args:
        image_path: Path to the image to verify.

    Returns:
        Tuple of (VerifyResult, decoded_data: str | None).
    """
    try:
        from pyzbar.pyzbar import decode as pyzbar_decode
    except (ImportError, OSError):
        return VerifyResult.SKIPPED, None

    with Image.open(image_path) as img:
        results = pyzbar_decode(img)
    if results:
        decoded = results[0].data.decode("utf-8", errors="replace")
        return VerifyResult.SCANNABLE, decoded
    return VerifyResult.NOT_SCANNABLE, None
