import argparse
import logging

from devshot.config import settings
from devshot.imaging.convert import validate_scale
from devshot.imaging.rotation import Rotation
from devshot.logging_config import configure_logging
from devshot.services.capture.adb_capture import (
    DeviceSelectionError,
    create_client,
    select_device,
    start_server,
)
from devshot.session import ScreenSession

logger = logging.getLogger(__name__)


def _scale_arg(value: str) -> float:
    try:
        return validate_scale(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="devshot", description="Capture and drive the screen of an ADB device")
    parser.add_argument(
        "-s",
        "--scale",
        type=_scale_arg,
        default=None,
        help="Display scale factor (default from SCALE, 1.0)",
    )
    parser.add_argument(
        "--serial",
        default=None,
        help="Device serial to use when several devices are attached",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Capture once, save to this PNG path and exit without opening a window",
    )
    parser.add_argument(
        "--rotate",
        type=int,
        default=0,
        help="Number of 90 degree clockwise turns to apply",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser


def cmd_capture_once(session: ScreenSession, output: str) -> int:
    frame = session.refresh()
    if not frame.available:
        raise SystemExit("Screen not available")
    path = session.save(output)
    if path is None:
        raise SystemExit(f"Unable to save {output}")
    logger.info("Saved screenshot to %s", path)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.scale is not None:
        scale = args.scale
    else:
        try:
            scale = validate_scale(settings.scale)
        except ValueError as exc:
            raise SystemExit(str(exc))
    logger.info("scale: %s", scale)

    start_server()
    try:
        device = select_device(create_client(), serial=args.serial)
    except DeviceSelectionError as e:
        # Emit a clear error and non-zero exit
        raise SystemExit(str(e))

    print(f"Taking screenshot from: {device.serial}")
    session = ScreenSession(
        device,
        scale=scale,
        rotation=Rotation.from_turns(args.rotate),
        serial=device.serial,
    )
    if args.output:
        return cmd_capture_once(session, args.output)

    # Import locally so headless use never loads Qt
    from devshot.ui.dialog import run_dialog

    run_dialog(session)
    print("Success.")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
