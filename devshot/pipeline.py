from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from PIL import Image

from devshot.config import settings
from devshot.imaging.convert import placeholder, to_image
from devshot.imaging.rotation import Rotation, apply_rotation
from devshot.services.capture import capture
from devshot.services.capture.framebuffer import RawCapture


@dataclass(frozen=True)
class Frame:
    image: Image.Image
    available: bool  # False for the placeholder; saving is only allowed when True


def render(raw: RawCapture | None, rotation: Rotation | int, scale: float) -> Frame:
    """Rotate fully, then scale. ``None`` renders the placeholder."""
    if raw is None:
        return Frame(
            image=placeholder(settings.placeholder_width, settings.placeholder_height),
            available=False,
        )
    return Frame(image=to_image(apply_rotation(raw, rotation), scale), available=True)


def refresh(device: Any, rotation: Rotation | int, scale: float) -> Frame:
    return render(capture(device), rotation, scale)
