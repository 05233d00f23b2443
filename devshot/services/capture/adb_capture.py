from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Callable
from typing import Any

from ppadb.client import Client as AdbClient

from devshot.config import settings
from devshot.services.capture.framebuffer import RawCapture, parse_framebuffer

logger = logging.getLogger(__name__)


class AdbCaptureError(RuntimeError):
    pass


class DeviceSelectionError(RuntimeError):
    pass


def adb_exec(args: list[str], timeout: float = 10.0) -> bytes:
    cmd = [settings.adb_executable] + args
    try:
        proc = subprocess.run(cmd, capture_output=True, timeout=timeout, check=True)
    except subprocess.CalledProcessError as exc:
        raise AdbCaptureError(exc.stderr.decode("utf-8", errors="ignore")) from exc
    except subprocess.TimeoutExpired as exc:
        raise AdbCaptureError(f"ADB command timed out: {' '.join(cmd)}") from exc
    except OSError as exc:
        raise AdbCaptureError(f"Unable to run {cmd[0]}: {exc}") from exc
    return proc.stdout


def start_server() -> None:
    """Best effort ``adb start-server`` so the client has something to talk to."""
    try:
        adb_exec(["start-server"], timeout=float(settings.adb_timeout))
    except AdbCaptureError as exc:
        logger.warning("Unable to start adb server: %s", exc)


def create_client() -> AdbClient:
    return AdbClient(host=settings.adb_host, port=settings.adb_port)


def select_device(
    client: Any,
    serial: str | None = None,
    timeout_s: float | None = None,
    poll_s: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    """Return the single attached device (or the one matching ``serial``).

    The device list is polled until it is non-empty or ``timeout_s`` elapses.
    """
    timeout = settings.device_list_timeout_s if timeout_s is None else timeout_s
    poll = settings.device_list_poll_s if poll_s is None else poll_s
    deadline = time.monotonic() + max(0.0, timeout)

    try:
        devices = list(client.devices())
        while not devices and time.monotonic() < deadline:
            sleep(poll)
            devices = list(client.devices())
    except (RuntimeError, OSError) as exc:
        raise DeviceSelectionError(f"Unable to reach adb server: {exc}") from exc

    if not devices:
        raise DeviceSelectionError("No devices found!")
    if serial:
        for device in devices:
            if device.serial == serial:
                return device
        available = [d.serial for d in devices]
        raise DeviceSelectionError(f"Device {serial} not found. Available devices: {available}")
    if len(devices) > 1:
        raise DeviceSelectionError("Error: more than one emulator or device available!")
    return devices[0]


def read_framebuffer(device: Any, timeout: float | None = None) -> RawCapture:
    """Request one raw framebuffer from ``device``.

    Raises whatever the transport raises: ``TimeoutError`` and ``OSError`` for
    socket failures, ``RuntimeError`` when the server refuses the command or
    the payload cannot be decoded.
    """
    with device.create_connection(timeout=timeout) as conn:
        conn.send("framebuffer:")
        payload = conn.read_all()
    capture = parse_framebuffer(bytes(payload))
    logger.debug(
        "Framebuffer %dx%d bpp=%d from %s", capture.width, capture.height, capture.bpp, device.serial
    )
    return capture
