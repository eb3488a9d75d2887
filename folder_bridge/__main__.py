"""Share a folder from the command line.

Usage:
    python -m folder_bridge ~/Photos --port 3000

Prints the pairing PIN and the bridge address, then serves until Ctrl+C.
"""
from __future__ import annotations

import argparse
import threading

from .config import BridgeConfig, ConfigValidationError
from .errors import BindFailureError, BridgeError
from .observability.logging import configure_logging, get_logger
from .session import SessionController

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = BridgeConfig()
    parser = argparse.ArgumentParser(prog='folder_bridge', description='Share a local folder with a paired device.')
    parser.add_argument('folder', help='Folder to share')
    parser.add_argument('--host', default=defaults.host)
    parser.add_argument('--port', type=int, default=defaults.port)
    parser.add_argument('--pairing', action=argparse.BooleanOptionalAction, default=defaults.require_pairing,
                        help='Require the PIN handshake before serving files')
    parser.add_argument('--pin-ttl', type=float, default=defaults.pin_ttl_seconds,
                        help='Seconds after which the PIN stops being accepted')
    parser.add_argument('--log-level', default=None)
    parser.add_argument('--log-format', choices=['console', 'json'], default=None)
    parser.add_argument('--startup-timeout', type=float, default=10.0)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None, stop_event: threading.Event | None = None) -> int:
    args = parse_args(argv)
    configure_logging(
        level=args.log_level,
        json_output=None if args.log_format is None else args.log_format == 'json',
    )

    config = BridgeConfig(
        host=args.host,
        port=args.port,
        require_pairing=args.pairing,
        pin_ttl_seconds=args.pin_ttl,
    )
    stop_event = stop_event or threading.Event()

    try:
        with SessionController(config) as controller:
            pin, session = controller.start_sharing(args.folder)
            if not controller.wait_until_running(args.startup_timeout):
                logger.error('bridge_start_timeout', timeout=args.startup_timeout)
                return 2

            session = controller.session
            print(f'Sharing {session.root}')
            print(f'Address: {session.address}')
            if config.require_pairing:
                print(f'PIN: {pin}')
            print('Press Ctrl+C to stop sharing.')

            try:
                # Event.wait with a timeout stays interruptible by Ctrl+C
                while not stop_event.wait(0.5):
                    pass
            except KeyboardInterrupt:
                logger.info('share_interrupted')
    except BindFailureError as e:
        logger.error('share_failed', error=str(e))
        return 2
    except ConfigValidationError as e:
        logger.error('invalid_config', error=str(e))
        return 1
    except BridgeError as e:
        logger.error('share_failed', error=str(e), error_code=e.code.value)
        return 1
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
