from __future__ import annotations

import logging
import subprocess

from devshot.actions.types import Action, KeyAction, SwipeAction, TapAction
from devshot.config import settings

logger = logging.getLogger(__name__)


def to_device_point(x: int, y: int, scale: float) -> tuple[int, int]:
    """Map a point on the scaled view back to device pixels."""
    return round(x / scale), round(y / scale)


def action_for_gesture(
    down: tuple[int, int],
    up: tuple[int, int],
    scale: float,
    duration_ms: int | None = None,
) -> TapAction | SwipeAction:
    """A press and release at the same view point is a tap, anything else a swipe."""
    x1, y1 = to_device_point(down[0], down[1], scale)
    if tuple(down) == tuple(up):
        return TapAction(x=x1, y=y1)
    x2, y2 = to_device_point(up[0], up[1], scale)
    return SwipeAction(x1=x1, y1=y1, x2=x2, y2=y2, duration_ms=duration_ms)


def command_for(action: Action, serial: str | None = None) -> list[str]:
    cmd = [settings.adb_executable]
    if serial:
        cmd += ["-s", serial]
    if isinstance(action, TapAction):
        return cmd + ["shell", "input", "tap", str(action.x), str(action.y)]
    if isinstance(action, SwipeAction):
        cmd += ["shell", "input", "swipe", str(action.x1), str(action.y1), str(action.x2), str(action.y2)]
        if action.duration_ms is not None:
            cmd.append(str(action.duration_ms))
        return cmd
    if isinstance(action, KeyAction):
        return cmd + ["shell", "input", "keyevent", str(action.keycode)]
    raise ValueError(f"Unsupported action: {action}")  # pragma: no cover - exhaustive typing


def execute(action: Action, serial: str | None = None) -> int | None:
    """Run the adb input command for ``action`` and wait for it.

    The exit code is logged and returned but not checked. ``None`` means the
    command could not be run at all.
    """
    cmd = command_for(action, serial)
    try:
        proc = subprocess.run(cmd, capture_output=True, timeout=float(settings.adb_timeout), check=False)
    except subprocess.TimeoutExpired:
        logger.warning("Process[%s] timed out", " ".join(cmd))
        return None
    except OSError as exc:
        logger.warning("Process[%s] failed to start: %s", " ".join(cmd), exc)
        return None
    logger.info("Process[%s] exitValue: %d", " ".join(cmd), proc.returncode)
    return proc.returncode
