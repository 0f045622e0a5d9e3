import pytest
from PIL import Image

from qr_icon_studio.encoder import SymbolEncoder, SymbolMatrix


class RecordingEncoder(SymbolEncoder):
    """Returns a fully dark matrix, or the given rows, and remembers every call."""

    def __init__(self, side: int = 21, rows=None):
        self.side = side
        self.rows = rows
        self.calls = []

    def name(self) -> str:
        return "recording"

    def encode(self, payload, tier, level):
        self.calls.append((payload, tier, level))
        rows = self.rows
        if rows is None:
            rows = [[True] * self.side for _ in range(self.side)]
        return SymbolMatrix.from_rows(rows, version=tier)


@pytest.fixture
def make_encoder():
    return RecordingEncoder


@pytest.fixture
def recording_encoder() -> RecordingEncoder:
    return RecordingEncoder()


@pytest.fixture
def checker_matrix() -> SymbolMatrix:
    return SymbolMatrix.from_rows(
        [[(r + c) % 2 == 0 for c in range(25)] for r in range(25)], version=2
    )


@pytest.fixture
def red_icon() -> Image.Image:
    return Image.new("RGBA", (60, 40), (255, 0, 0, 255))


@pytest.fixture
def icon_path(tmp_path, red_icon) -> str:
    path = tmp_path / "icon.png"
    red_icon.save(path)
    return str(path)
