import pytest
from PIL import Image

from qr_icon_studio.image_utils import center_crop_square, encode_png, load_icon


@pytest.mark.parametrize(
    "size, box",
    [
        ((60, 40), (10, 0, 50, 40)),
        ((40, 61), (0, 10, 40, 50)),
    ],
)
def test_center_crop_takes_middle_square(size, box) -> None:
    img = Image.new("RGB", size)
    img.paste((255, 0, 0), box)
    cropped = center_crop_square(img)
    assert cropped.size == (min(size), min(size))
    assert cropped.getcolors() == [(min(size) ** 2, (255, 0, 0))]


def test_center_crop_keeps_square_image() -> None:
    img = Image.new("RGB", (32, 32))
    assert center_crop_square(img) is img


def test_load_icon_converts_to_rgba(tmp_path) -> None:
    path = tmp_path / "logo.png"
    path.write_bytes(encode_png(Image.new("RGB", (12, 8), (1, 2, 3))))
    icon = load_icon(str(path))
    assert icon.mode == "RGBA"
    assert icon.size == (12, 8)
