from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from PIL import Image

logger = logging.getLogger(__name__)


def default_filename(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"device-{now:%Y-%m-%d}-{now:%H%M%S}.png"


def ensure_png_suffix(path: str | Path) -> Path:
    p = Path(path)
    if not p.name.endswith(".png"):
        p = p.with_name(p.name + ".png")
    return p


def save_png(image: Image.Image, path: str | Path) -> Path:
    """Write ``image`` as a single-frame PNG. Raises ``OSError`` when unwritable."""
    target = ensure_png_suffix(path)
    logger.debug("Saving image to %s", target)
    image.save(target, format="PNG")
    return target


def copy_to_clipboard(image: Image.Image, clipboard: Any) -> bool:
    """Hand ``image`` to the OS clipboard.

    ``clipboard`` must expose ``set_image(image)``. Failures are logged and
    reported through the return value only.
    """
    try:
        clipboard.set_image(image)
    except Exception as exc:  # platform clipboards fail in many ways
        logger.warning("Unable to copy image to clipboard: %s", exc)
        return False
    return True
