"""Generate and export pipeline tying the components together."""

import logging
import os
from dataclasses import dataclass

from PIL import Image

from qr_icon_studio import PREVIEW_SIZE
from qr_icon_studio.capacity import ErrorCorrectionLevel, select_tier
from qr_icon_studio.compositor import compose
from qr_icon_studio.encoder import QRCodeEncoder, SymbolEncoder
from qr_icon_studio.errors import EmptyInput
from qr_icon_studio.image_utils import encode_png, save_png
from qr_icon_studio.sanitizer import sanitize, to_payload
from qr_icon_studio.session import SessionState

logger = logging.getLogger(__name__)


def export_filename(size: int) -> str:
    return f"qrcode-{size}x{size}.png"


@dataclass(frozen=True)
class ExportResult:
    """PNG bytes of one export and the filename to offer for it."""

    size: int
    filename: str
    png: bytes

    def save(self, directory: str = ".") -> str:
        return save_png(self.png, os.path.join(directory, self.filename))


class QRStudio:
    """Owns the session and runs generation and export against it.

    Args:
        encoder: Symbol encoding backend. Defaults to python-qrcode.
        state: Session to read and record into. A fresh one by default.
        preview_size: Pixel size of the image returned by ``generate``.
        strict_capacity: Fail with CapacityExceeded when the payload is
            larger than the capacity table, instead of handing the largest
            version to the encoder.
    """

    def __init__(
        self,
        encoder: SymbolEncoder | None = None,
        state: SessionState | None = None,
        preview_size: int = PREVIEW_SIZE,
        strict_capacity: bool = False,
    ):
        self.encoder = encoder or QRCodeEncoder()
        self.state = state or SessionState()
        self.preview_size = preview_size
        self.strict_capacity = strict_capacity

    def render(self, text: str, level: ErrorCorrectionLevel, size: int) -> Image.Image:
        """Encode already-sanitized text and compose it at ``size`` pixels."""
        payload = to_payload(text)
        tier = select_tier(payload, level, strict=self.strict_capacity)
        matrix = self.encoder.encode(payload, tier, level)
        logger.debug(
            "Encoded %d bytes with %s: requested version %d, got %s (%d modules)",
            len(payload), self.encoder.name(), tier, matrix.version, matrix.size,
        )
        return compose(matrix, size, self.state.icon)

    def generate(self, raw_text: str, level) -> Image.Image:
        """Build the preview image and remember the input for later exports.

        Raises:
            EmptyInput: If nothing is left after trimming and sanitizing.
            CapacityExceeded: If the text does not fit at this level.
            EncodingUnavailable: If the encoder fails.
        """
        level = ErrorCorrectionLevel.parse(level)
        text = sanitize(raw_text.strip())
        if not text:
            raise EmptyInput("Please enter text to encode")

        preview = self.render(text, level, self.preview_size)
        self.state.record(text, level)
        return preview

    def export(self, size: int) -> ExportResult:
        """Re-render the last generation at ``size`` pixels as PNG.

        Raises:
            NoActiveSession: If nothing has been generated yet.
            ValueError: If size is not a positive integer.
        """
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ValueError(f"Export size must be a positive integer, got {size!r}")

        session = self.state.require_payload()
        image = self.render(session.text, session.level, size)
        return ExportResult(size=size, filename=export_filename(size), png=encode_png(image))
