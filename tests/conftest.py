from __future__ import annotations

import struct
from collections.abc import Callable

import pytest

from devshot.services.capture.framebuffer import RawCapture


def rgba_capture(width: int, height: int, pixels: list[tuple[int, int, int]]) -> RawCapture:
    data = b"".join(bytes((r, g, b, 0xFF)) for r, g, b in pixels)
    return RawCapture(
        width=width,
        height=height,
        bpp=32,
        red_mask=0x000000FF,
        green_mask=0x0000FF00,
        blue_mask=0x00FF0000,
        alpha_mask=0xFF000000,
        data=data,
    )


def rgba_payload(width: int, height: int, pixels: list[tuple[int, int, int]], version: int = 1) -> bytes:
    data = b"".join(bytes((r, g, b, 0xFF)) for r, g, b in pixels)
    # red, blue, green, alpha as (offset, length) pairs
    channels = (0, 8, 16, 8, 8, 8, 24, 8)
    if version == 2:
        header = struct.pack("<6I", 2, 32, 0, len(data), width, height)
    else:
        header = struct.pack("<5I", 1, 32, len(data), width, height)
    return header + struct.pack("<8I", *channels) + data


class FakeConnection:
    def __init__(self, payload: bytes = b"", error: BaseException | None = None) -> None:
        self.payload = payload
        self.error = error
        self.sent: list[str] = []
        self.closed = False

    def __enter__(self) -> FakeConnection:
        return self

    def __exit__(self, *exc: object) -> bool:
        self.closed = True
        return False

    def send(self, msg: str) -> bool:
        self.sent.append(msg)
        if self.error is not None:
            raise self.error
        return True

    def read_all(self) -> bytearray:
        return bytearray(self.payload)


class FakeDevice:
    """Stands in for a ppadb device: hands out one connection per capture."""

    def __init__(self, serial: str = "emulator-5554", payload: bytes = b"", error: BaseException | None = None):
        self.serial = serial
        self.payload = payload
        self.error = error
        self.connections: list[FakeConnection] = []

    def create_connection(self, timeout: float | None = None) -> FakeConnection:
        conn = FakeConnection(self.payload, self.error)
        self.connections.append(conn)
        return conn


class FakeClient:
    def __init__(self, *device_lists: list[FakeDevice], error: BaseException | None = None) -> None:
        self._lists = list(device_lists) or [[]]
        self.error = error
        self.calls = 0

    def devices(self) -> list[FakeDevice]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        idx = min(self.calls - 1, len(self._lists) - 1)
        return self._lists[idx]


PIXELS_2x2 = [(10, 0, 0), (20, 0, 0), (30, 0, 0), (40, 0, 0)]


@pytest.fixture
def make_device() -> Callable[..., FakeDevice]:
    def factory(**kwargs: object) -> FakeDevice:
        kwargs.setdefault("payload", rgba_payload(2, 2, PIXELS_2x2))
        return FakeDevice(**kwargs)  # type: ignore[arg-type]

    return factory
