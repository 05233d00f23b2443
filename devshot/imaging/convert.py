from __future__ import annotations

import math

import numpy as np
from PIL import Image, ImageDraw

from devshot.services.capture.framebuffer import RawCapture

# Nearest keeps device pixels crisp and output reproducible across runs
RESAMPLE = Image.Resampling.NEAREST

PLACEHOLDER_COLOR = (0, 0, 255)


def validate_scale(scale: float) -> float:
    value = float(scale)
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"Scale must be a positive number, got {scale!r}")
    return value


def scaled_size(width: int, height: int, scale: float) -> tuple[int, int]:
    return max(1, round(width * scale)), max(1, round(height * scale))


def _pixel_values(capture: RawCapture) -> np.ndarray:
    count = capture.width * capture.height
    raw = np.frombuffer(capture.data, dtype=np.uint8, count=count * capture.bytes_per_pixel)
    if capture.bpp == 16:
        values = raw.view("<u2").astype(np.uint32)
    elif capture.bpp == 32:
        values = raw.view("<u4").astype(np.uint32)
    elif capture.bpp == 24:
        b = raw.reshape(-1, 3).astype(np.uint32)
        values = b[:, 0] | (b[:, 1] << 8) | (b[:, 2] << 16)
    else:
        raise ValueError(f"Unsupported bits per pixel: {capture.bpp}")
    return values.reshape(capture.height, capture.width)


def _channel(values: np.ndarray, mask: int) -> np.ndarray:
    if not mask:
        return np.zeros(values.shape, dtype=np.uint8)
    shift = (mask & -mask).bit_length() - 1
    bits = (mask >> shift).bit_length()
    chan = (values & np.uint32(mask)) >> np.uint32(shift)
    if bits == 8:
        return chan.astype(np.uint8)
    top = (1 << bits) - 1
    # widen narrow channels (e.g. RGB565) to the full 0-255 range
    return ((chan * 255 + top // 2) // top).astype(np.uint8)


def decode(capture: RawCapture) -> Image.Image:
    """Convert a raw capture into an RGB image at native size."""
    values = _pixel_values(capture)
    rgb = np.dstack(
        [
            _channel(values, capture.red_mask),
            _channel(values, capture.green_mask),
            _channel(values, capture.blue_mask),
        ]
    )
    return Image.fromarray(rgb)


def to_image(capture: RawCapture, scale: float = 1.0) -> Image.Image:
    scale = validate_scale(scale)
    image = decode(capture)
    size = scaled_size(capture.width, capture.height, scale)
    if size == image.size:
        return image
    resized = image.resize(size, RESAMPLE)
    image.close()
    return resized


def placeholder(width: int = 320, height: int = 240) -> Image.Image:
    """Art shown when no capture is available: a crossed-out rectangle."""
    img = Image.new("RGB", (width, height), color=(255, 255, 255))
    draw = ImageDraw.Draw(img)
    draw.line((0, 0, width - 1, height - 1), fill=PLACEHOLDER_COLOR)
    draw.line((0, height - 1, width - 1, 0), fill=PLACEHOLDER_COLOR)
    return img
