from __future__ import annotations

from dataclasses import replace
from enum import IntEnum

import numpy as np

from devshot.services.capture.framebuffer import RawCapture


class Rotation(IntEnum):
    """Clockwise rotation applied to the displayed capture, in degrees."""
    ROTATE_0 = 0
    ROTATE_90 = 90
    ROTATE_180 = 180
    ROTATE_270 = 270

    @property
    def turns(self) -> int:
        return self.value // 90

    def next(self) -> Rotation:
        return Rotation.from_turns(self.turns + 1)

    @classmethod
    def from_turns(cls, turns: int) -> Rotation:
        return cls((int(turns) % 4) * 90)


def _pixel_grid(capture: RawCapture) -> np.ndarray:
    bpp = capture.bytes_per_pixel
    buf = np.frombuffer(capture.data, dtype=np.uint8, count=capture.width * capture.height * bpp)
    return buf.reshape(capture.height, capture.width, bpp)


def apply_rotation(capture: RawCapture, rotation: Rotation | int) -> RawCapture:
    """Return ``capture`` turned clockwise by ``rotation`` in a single transform.

    A plain int is read as a number of quarter turns.
    """
    if not isinstance(rotation, Rotation):
        rotation = Rotation.from_turns(rotation)
    if rotation is Rotation.ROTATE_0:
        return capture
    # rot90 turns counter-clockwise for positive k
    rotated = np.rot90(_pixel_grid(capture), k=-rotation.turns)
    height, width = rotated.shape[:2]
    return replace(capture, width=width, height=height, data=np.ascontiguousarray(rotated).tobytes())


def rotate(capture: RawCapture) -> RawCapture:
    """One 90 degree clockwise turn."""
    return apply_rotation(capture, Rotation.ROTATE_90)
