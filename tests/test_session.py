import pytest
from PIL import Image

from qr_icon_studio.capacity import ErrorCorrectionLevel
from qr_icon_studio.errors import NoActiveSession
from qr_icon_studio.session import GeneratedSession, SessionState


def test_empty_session() -> None:
    state = SessionState()
    assert state.current_payload() is None
    with pytest.raises(NoActiveSession):
        state.require_payload()


def test_record_overwrites() -> None:
    state = SessionState()
    state.record("first", ErrorCorrectionLevel.L)
    state.record("second", ErrorCorrectionLevel.H)
    assert state.current_payload() == GeneratedSession("second", ErrorCorrectionLevel.H)


def test_snapshot_is_immutable() -> None:
    state = SessionState()
    snapshot = state.record("text", ErrorCorrectionLevel.M)
    with pytest.raises(AttributeError):
        snapshot.text = "other"


def test_upload_icon_installs_image(icon_path) -> None:
    state = SessionState()
    icon = state.upload_icon(icon_path).result(timeout=5)
    assert state.icon is icon
    assert icon.size == (60, 40)
    assert icon.mode == "RGBA"


def test_upload_cancel_clears_icon(icon_path) -> None:
    state = SessionState()
    state.upload_icon(icon_path).result(timeout=5)
    assert state.upload_icon(None) is None
    assert state.icon is None


def test_failed_upload_keeps_previous_icon(icon_path, tmp_path) -> None:
    state = SessionState()
    state.upload_icon(icon_path).result(timeout=5)
    previous = state.icon

    bogus = tmp_path / "not-an-image.png"
    bogus.write_bytes(b"plain text")
    with pytest.raises(ValueError):
        state.upload_icon(str(bogus)).result(timeout=5)
    assert state.icon is previous


def test_missing_icon_file(tmp_path) -> None:
    state = SessionState()
    with pytest.raises(FileNotFoundError):
        state.upload_icon(str(tmp_path / "missing.png")).result(timeout=5)
    assert state.icon is None


def test_superseded_upload_is_discarded(icon_path) -> None:
    state = SessionState()
    future = state.upload_icon(icon_path)
    replacement = Image.new("RGBA", (8, 8), (0, 0, 255, 255))
    state.set_icon(replacement)
    future.result(timeout=5)
    assert state.icon is replacement


def test_upload_future_cannot_be_cancelled(icon_path) -> None:
    future = SessionState().upload_icon(icon_path)
    assert future.cancel() is False
    future.result(timeout=5)
