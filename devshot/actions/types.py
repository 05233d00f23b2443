from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ActionKind = Literal["tap", "swipe", "key"]

KEYCODE_HOME = 3
KEYCODE_BACK = 4


@dataclass(frozen=True)
class TapAction:
    kind: ActionKind = "tap"
    x: int = 0
    y: int = 0


@dataclass(frozen=True)
class SwipeAction:
    kind: ActionKind = "swipe"
    x1: int = 0
    y1: int = 0
    x2: int = 0
    y2: int = 0
    duration_ms: int | None = None


@dataclass(frozen=True)
class KeyAction:
    kind: ActionKind = "key"
    keycode: int = KEYCODE_HOME


Action = TapAction | SwipeAction | KeyAction
