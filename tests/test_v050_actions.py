from __future__ import annotations

import subprocess

import pytest

from devshot.actions import executor
from devshot.actions.executor import action_for_gesture, command_for, execute, to_device_point
from devshot.actions.types import KEYCODE_BACK, KEYCODE_HOME, KeyAction, SwipeAction, TapAction
from devshot.config import settings


@pytest.mark.parametrize(
    ("x", "y", "scale", "expected"),
    [
        (100, 50, 1.0, (100, 50)),
        (100, 50, 0.5, (200, 100)),
        (101, 51, 2.0, (round(101 / 2.0), round(51 / 2.0))),
        (10, 7, 0.3, (round(10 / 0.3), round(7 / 0.3))),
    ],
)
def test_to_device_point(x: int, y: int, scale: float, expected: tuple[int, int]) -> None:
    assert to_device_point(x, y, scale) == expected


def test_same_point_is_tap() -> None:
    assert action_for_gesture((40, 60), (40, 60), 0.5) == TapAction(x=80, y=120)


def test_moved_point_is_swipe() -> None:
    action = action_for_gesture((10, 20), (30, 40), 0.5, duration_ms=300)
    assert action == SwipeAction(x1=20, y1=40, x2=60, y2=80, duration_ms=300)


def test_commands(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "adb_path", "adb")
    monkeypatch.setattr(settings, "adb_bindir", None)
    assert command_for(TapAction(x=1, y=2)) == ["adb", "shell", "input", "tap", "1", "2"]
    assert command_for(SwipeAction(x1=1, y1=2, x2=3, y2=4), serial="abc") == [
        "adb", "-s", "abc", "shell", "input", "swipe", "1", "2", "3", "4",
    ]
    assert command_for(KeyAction(keycode=KEYCODE_HOME))[-2:] == ["keyevent", "3"]
    assert command_for(KeyAction(keycode=KEYCODE_BACK))[-1] == "4"


def test_adb_bindir_overrides_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "adb_bindir", "/opt/sdk/platform-tools")
    assert command_for(TapAction())[0].endswith("adb")
    assert command_for(TapAction())[0].startswith("/opt/sdk/platform-tools")


def test_execute_returns_exit_code(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 1, b"", b"")

    monkeypatch.setattr(executor.subprocess, "run", fake_run)
    assert execute(TapAction(x=5, y=6)) == 1
    assert calls[0][-2:] == ["5", "6"]


def test_execute_missing_adb_is_not_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(executor.subprocess, "run", fake_run)
    assert execute(KeyAction(keycode=KEYCODE_BACK)) is None


def test_execute_timeout_is_not_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, 1)

    monkeypatch.setattr(executor.subprocess, "run", fake_run)
    assert execute(TapAction()) is None
