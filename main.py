import argparse
import sys
from pathlib import Path

from loguru import logger

from portwatch.config import (
    FAILURE_THRESHOLD,
    LOOPBACK_HOST,
    MONITOR_HOST,
    MONITOR_INTERVAL_SEC,
    MONITOR_PORT,
)
from portwatch.dispatcher import HELP_TEXT, CommandDispatcher
from portwatch.errors import ConfigError
from portwatch.events import EventLog, configure_logging
from portwatch.models import Target
from portwatch.monitor import ReachabilityMonitor
from portwatch.notify import desktop_notify
from portwatch.registry import Registry
from portwatch.storage import get_config_path, load_port_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TCP port listener, tester and server monitor")
    parser.add_argument("--config", type=Path, default=None, help="port/label JSON file (default: ports.json)")
    parser.add_argument("--monitor-host", default=MONITOR_HOST, help="host watched by the reachability monitor")
    parser.add_argument("--monitor-port", type=int, default=MONITOR_PORT, help="port probed by the monitor")
    parser.add_argument("--interval", type=float, default=MONITOR_INTERVAL_SEC, help="seconds between checks")
    parser.add_argument("--threshold", type=int, default=FAILURE_THRESHOLD,
                        help="consecutive failures before the target is offline")
    parser.add_argument("--listen-host", default=LOOPBACK_HOST, help="address listeners bind to")
    parser.add_argument("--notify", action="store_true", help="desktop notification on online/offline changes")
    parser.add_argument("--log-level", default="INFO", help="diagnostic log level (stderr)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    config_path = args.config or get_config_path()
    try:
        port_config = load_port_config(config_path)
    except ConfigError as e:
        print(f"[X] {e}", file=sys.stderr)
        return 2

    events = EventLog()
    monitor = ReachabilityMonitor(
        Target(args.monitor_host, args.monitor_port),
        events,
        interval=args.interval,
        threshold=args.threshold,
        notify=desktop_notify if args.notify else None,
    )
    registry = Registry(events, host=args.listen_host)
    dispatcher = CommandDispatcher(registry, monitor, port_config)

    logger.info("Monitoring {} every {}s", monitor.target, args.interval)
    monitor.start()
    dispatcher.autostart()
    print(HELP_TEXT)

    try:
        dispatcher.run(sys.stdin)
    except KeyboardInterrupt:
        pass
    finally:
        registry.stop_all()
        monitor.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
