from __future__ import annotations

import logging
from typing import Any, Optional

from devshot.config import settings
from devshot.services.capture.framebuffer import RawCapture

logger = logging.getLogger(__name__)


def capture(device: Any) -> Optional[RawCapture]:
    """
    Grab one raw framebuffer from an ADB-connected device.

    Transport failures, timeouts and commands rejected by the server all yield
    ``None`` ("screen not available") and a warning; they are never raised.
    """
    # Import locally so the pipeline can be used without the ADB client installed
    from devshot.services.capture.adb_capture import read_framebuffer

    try:
        return read_framebuffer(device, timeout=float(settings.adb_timeout))
    except TimeoutError:
        logger.warning("Unable to get frame buffer: timeout")
    except OSError as exc:
        logger.warning("Unable to get frame buffer: %s", exc)
    except RuntimeError as exc:
        # ppadb reports a non-OKAY status as RuntimeError; FramebufferError derives from it
        logger.warning("Unable to get frame buffer: %s", exc)
    return None
