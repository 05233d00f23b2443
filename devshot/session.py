from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from devshot.actions.executor import action_for_gesture, execute
from devshot.actions.types import Action, KeyAction
from devshot.config import settings
from devshot.imaging.convert import validate_scale
from devshot.imaging.export import copy_to_clipboard, save_png
from devshot.imaging.rotation import Rotation
from devshot.pipeline import Frame, render
from devshot.services.capture import capture
from devshot.services.capture.framebuffer import RawCapture

logger = logging.getLogger(__name__)


class ScreenSession:
    """State of one viewing session against one device.

    Holds the last raw capture (unrotated), the rotation chosen by the user and
    the frame currently on display. Everything runs on the caller's thread.
    """

    def __init__(
        self,
        device: Any,
        scale: float = 1.0,
        rotation: Rotation = Rotation.ROTATE_0,
        serial: str | None = None,
        relay_delay_s: float | None = None,
        swipe_duration_ms: int | None = None,
        runner: Callable[..., int | None] = execute,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.device = device
        self.scale = validate_scale(scale)
        self.rotation = rotation
        self.serial = serial
        self.relay_delay_s = settings.relay_delay_s if relay_delay_s is None else relay_delay_s
        self.swipe_duration_ms = settings.swipe_duration_ms if swipe_duration_ms is None else swipe_duration_ms
        self._runner = runner
        self._sleep = sleep
        self.raw: RawCapture | None = None
        self.frame: Frame | None = None

    @property
    def available(self) -> bool:
        return self.frame is not None and self.frame.available

    @property
    def can_save(self) -> bool:
        return self.available

    def _show(self, frame: Frame) -> Frame:
        previous, self.frame = self.frame, frame
        if previous is not None:
            previous.image.close()
        return frame

    def refresh(self) -> Frame:
        """Capture a new framebuffer and redisplay it with the current rotation."""
        self.raw = capture(self.device)
        return self._show(render(self.raw, self.rotation, self.scale))

    def rotate(self) -> Frame | None:
        """Turn the display another 90 degrees clockwise; no-op without a capture."""
        if self.raw is None:
            return None
        self.rotation = self.rotation.next()
        return self._show(render(self.raw, self.rotation, self.scale))

    def save(self, path: str | Path) -> Path | None:
        if not self.can_save or self.frame is None:
            logger.warning("Nothing to save: screen not available")
            return None
        try:
            return save_png(self.frame.image, path)
        except OSError as exc:
            logger.warning("Unable to save %s: %s", path, exc)
            return None

    def copy(self, clipboard: Any) -> bool:
        if self.frame is None:
            return False
        return copy_to_clipboard(self.frame.image, clipboard)

    def relay(self, action: Action) -> Frame:
        """Forward ``action`` to the device, wait for it to settle, then refresh."""
        self._runner(action, self.serial)
        if self.relay_delay_s > 0:
            self._sleep(self.relay_delay_s)
        return self.refresh()

    def relay_gesture(self, down: tuple[int, int], up: tuple[int, int]) -> Frame:
        return self.relay(action_for_gesture(down, up, self.scale, self.swipe_duration_ms))

    def press_key(self, keycode: int) -> Frame:
        return self.relay(KeyAction(keycode=keycode))
