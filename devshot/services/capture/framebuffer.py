from __future__ import annotations

import struct
from dataclasses import dataclass


class FramebufferError(RuntimeError):
    pass


@dataclass(frozen=True)
class RawCapture:
    """Unprocessed framebuffer snapshot.

    Channel masks apply to each pixel read as a little-endian integer of
    ``bpp`` bits.
    """

    width: int
    height: int
    bpp: int
    red_mask: int
    green_mask: int
    blue_mask: int
    data: bytes
    alpha_mask: int = 0

    @property
    def bytes_per_pixel(self) -> int:
        return self.bpp // 8


# Number of uint32 header fields following the version word
_HEADER_FIELDS = {16: 3, 1: 12, 2: 13}
_SUPPORTED_BPP = (16, 24, 32)


def _mask(offset: int, length: int) -> int:
    return ((1 << length) - 1) << offset


def parse_framebuffer(payload: bytes) -> RawCapture:
    """Decode the response of the ADB ``framebuffer:`` service."""
    if len(payload) < 4:
        raise FramebufferError("Empty framebuffer response")
    (version,) = struct.unpack_from("<I", payload, 0)
    count = _HEADER_FIELDS.get(version)
    if count is None:
        raise FramebufferError(f"Unsupported framebuffer version: {version}")

    header_end = 4 + count * 4
    if len(payload) < header_end:
        raise FramebufferError("Truncated framebuffer header")
    fields = struct.unpack_from(f"<{count}I", payload, 4)

    if version == 16:
        # legacy header: RGB565 implied
        size, width, height = fields
        bpp = 16
        red, green, blue, alpha = _mask(11, 5), _mask(5, 6), _mask(0, 5), 0
    else:
        if version == 2:
            bpp, _color_space, size, width, height, *channels = fields
        else:
            bpp, size, width, height, *channels = fields
        r_off, r_len, b_off, b_len, g_off, g_len, a_off, a_len = channels
        red = _mask(r_off, r_len)
        green = _mask(g_off, g_len)
        blue = _mask(b_off, b_len)
        alpha = _mask(a_off, a_len)

    if bpp not in _SUPPORTED_BPP:
        raise FramebufferError(f"Unsupported bits per pixel: {bpp}")
    if width <= 0 or height <= 0:
        raise FramebufferError(f"Invalid framebuffer size: {width}x{height}")

    expected = width * height * (bpp // 8)
    if size < expected:
        raise FramebufferError(f"Framebuffer size {size} too small for {width}x{height}@{bpp}")
    data = bytes(payload[header_end : header_end + expected])
    if len(data) < expected:
        raise FramebufferError(f"Truncated framebuffer data: got {len(data)} of {expected} bytes")

    return RawCapture(
        width=width,
        height=height,
        bpp=bpp,
        red_mask=red,
        green_mask=green,
        blue_mask=blue,
        alpha_mask=alpha,
        data=data,
    )
