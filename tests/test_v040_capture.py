from __future__ import annotations

import socket

import pytest

from devshot.pipeline import refresh
from devshot.services.capture import capture


def test_capture_reads_framebuffer(make_device) -> None:
    device = make_device()
    cap = capture(device)
    assert cap is not None
    assert (cap.width, cap.height) == (2, 2)
    conn = device.connections[0]
    assert conn.sent == ["framebuffer:"]
    assert conn.closed


@pytest.mark.parametrize(
    "error",
    [
        OSError("connection reset"),
        socket.timeout("timed out"),
        RuntimeError("ERROR: 'FAIL' device offline"),
    ],
)
def test_capture_failures_are_unavailable(make_device, error: BaseException) -> None:
    assert capture(make_device(error=error)) is None


def test_capture_garbage_payload_is_unavailable(make_device) -> None:
    assert capture(make_device(payload=b"\x07\x00\x00\x00junk")) is None


def test_capture_logs_warning(make_device, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING"):
        capture(make_device(error=socket.timeout("timed out")))
    assert "Unable to get frame buffer: timeout" in caplog.text


def test_refresh_applies_rotation_then_scale(make_device) -> None:
    frame = refresh(make_device(), 1, 2.0)
    assert frame.available
    assert frame.image.size == (4, 4)
    # clockwise turn puts the bottom-left pixel in the top-left corner
    assert frame.image.getpixel((0, 0)) == (30, 0, 0)


def test_refresh_without_capture_yields_placeholder(make_device) -> None:
    frame = refresh(make_device(error=OSError("gone")), 0, 1.0)
    assert frame.available is False
    assert frame.image.size == (320, 240)
