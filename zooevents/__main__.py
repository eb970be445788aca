"""Command-line entry for zooevents.

Without a window the CLI starts the HTTP server. With ``--from`` and ``--to``
it expands the configured dataset once and prints the instances as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, NoReturn, Optional
from zoneinfo import ZoneInfo

from . import _init_logging, run_server
from .config_manager import ConfigManager
from .dataset import load_event_definitions
from .event_aggregator import EventSetAggregator
from .exceptions import ZooEventsError

logger = logging.getLogger(__name__)


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for zooevents CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="zooevents",
        description="Zoo events - expand recurring event definitions into a date window",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m zooevents                                   # Start server on default port (3000)
  python -m zooevents --port 8080                       # Start server on port 8080
  python -m zooevents --from 2023-01-01 --to 2023-01-31 # Print January's events as JSON
        """,
    )

    parser.add_argument(
        "--port",
        type=int,
        metavar="PORT",
        help="Port number for the web server (default: 3000, or ZOOEVENTS_WEB_PORT)",
    )
    parser.add_argument(
        "--dataset",
        metavar="PATH",
        help="JSON file with event definitions (default: ZOOEVENTS_DATASET_PATH)",
    )
    parser.add_argument("--from", dest="window_start", metavar="WHEN", help="Window start (ISO-8601 or epoch ms)")
    parser.add_argument("--to", dest="window_end", metavar="WHEN", help="Window end (ISO-8601 or epoch ms)")
    parser.add_argument(
        "--epoch-ms",
        action="store_true",
        help="Print start/end as epoch milliseconds instead of ISO-8601",
    )

    return parser


def _apply_overrides(cfg: dict[str, Any], args: argparse.Namespace) -> dict[str, Any]:
    if args.port is not None:
        cfg["server_port"] = args.port
    if args.dataset:
        cfg["dataset_path"] = args.dataset
    return cfg


def expand_to_json(cfg: dict[str, Any], window_start: str, window_end: str, epoch_ms: bool = False) -> str:
    """Expand the configured dataset over a window and render it as JSON."""
    definitions = load_event_definitions(cfg["dataset_path"])
    timezone_name = cfg.get("default_timezone")
    instances = EventSetAggregator.from_settings(cfg).expand_all(
        definitions,
        window_start,
        window_end,
        timezone=ZoneInfo(timezone_name) if timezone_name else None,
    )
    return json.dumps([instance.to_api_dict(epoch_ms=epoch_ms) for instance in instances], indent=2)


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Run the zooevents CLI."""
    parser = _create_parser()
    args = parser.parse_args(argv)

    if (args.window_start is None) != (args.window_end is None):
        parser.error("--from and --to must be given together")

    if args.window_start is None:
        overrides: dict[str, Any] = _apply_overrides({}, args)
        try:
            run_server(overrides)
        except OSError as exc:
            print(f"Error: could not start server: {exc}", file=sys.stderr)
            sys.exit(1)
        sys.exit(0)

    _init_logging("WARNING")
    cfg = _apply_overrides(ConfigManager().load_full_config(), args)
    try:
        output = expand_to_json(cfg, args.window_start, args.window_end, epoch_ms=args.epoch_ms)
    except (ZooEventsError, ValueError) as exc:
        logger.debug("Expansion failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(output)
    sys.exit(0)


if __name__ == "__main__":
    main()
