"""Application state shared by preview and export.

Holds the last successful generation and the uploaded icon. Both are
replaced wholesale, never mutated, so an export always sees one consistent
snapshot even if a new generation or upload lands meanwhile.
"""

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass

from PIL import Image

from qr_icon_studio.capacity import ErrorCorrectionLevel
from qr_icon_studio.errors import NoActiveSession
from qr_icon_studio.image_utils import load_icon_async

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedSession:
    """Sanitized text and level of the last successful generation."""

    text: str
    level: ErrorCorrectionLevel


class SessionState:
    def __init__(self):
        self._last: GeneratedSession | None = None
        self._icon: Image.Image | None = None
        self._upload_seq = 0
        self._lock = threading.Lock()

    # -- generation snapshot -------------------------------------------------

    def record(self, text: str, level: ErrorCorrectionLevel) -> GeneratedSession:
        """Overwrite the stored generation."""
        self._last = GeneratedSession(text, level)
        return self._last

    def current_payload(self) -> GeneratedSession | None:
        return self._last

    def require_payload(self) -> GeneratedSession:
        if self._last is None:
            raise NoActiveSession("Please generate a QR code first")
        return self._last

    # -- icon ----------------------------------------------------------------

    @property
    def icon(self) -> Image.Image | None:
        return self._icon

    def set_icon(self, icon: Image.Image | None) -> None:
        with self._lock:
            self._upload_seq += 1
            self._icon = icon

    def clear_icon(self) -> None:
        self.set_icon(None)

    def upload_icon(self, path: str | None):
        """Start decoding an icon and install it when done.

        Passing None clears the icon immediately and returns None. Otherwise
        returns a future that completes after the decoded icon is installed.
        If another upload or clear happens before this one finishes, its
        result is discarded. A failed decode leaves the current icon in
        place; the error is set on the future.
        """
        if path is None:
            self.clear_icon()
            return None

        with self._lock:
            self._upload_seq += 1
            seq = self._upload_seq

        installed: Future = Future()
        installed.set_running_or_notify_cancel()

        def _install(done):
            error = done.exception()
            if error is not None:
                logger.debug("Icon upload %s failed: %s", path, error)
                installed.set_exception(error)
                return
            icon = done.result()
            with self._lock:
                if seq == self._upload_seq:
                    self._icon = icon
                else:
                    logger.debug("Discarding superseded icon upload %s", path)
            installed.set_result(icon)

        load_icon_async(path).add_done_callback(_install)
        return installed
