"""Command-line entry point for the directory watcher."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .config import ConfigError, WatchConfig, load_config
from .differ import Handlers
from .handlers import HandlerRegistry
from .sample_handlers import print_event
from .scanner import TraversalError
from .watcher import Watcher


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treewatch",
        description="Poll a directory tree and report added, changed and deleted entries",
    )
    parser.add_argument("root", nargs="?", help="Directory to watch (overrides the config file)")
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between scans (default: 1.0 or the config file value)",
    )
    parser.add_argument("--max-depth", type=int, help="Do not descend below this depth")
    parser.add_argument(
        "--no-follow-symlinks",
        action="store_true",
        help="Stat links themselves instead of their targets",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    try:
        watch_cfg, handlers = _resolve_settings(args, parser)
    except ConfigError as exc:
        logging.error("%s", exc)
        raise SystemExit(2) from exc

    watcher = Watcher(
        watch_cfg.root_path,
        poll_interval=watch_cfg.poll_interval,
        handlers=handlers,
        max_depth=watch_cfg.max_depth,
        follow_symlinks=watch_cfg.follow_symlinks,
    )
    try:
        watcher.run()
    except TraversalError as exc:
        logging.error("%s", exc)
        raise SystemExit(1) from exc


def _resolve_settings(args: argparse.Namespace, parser: argparse.ArgumentParser):
    if args.config:
        app_config = load_config(Path(args.config))
        watch_cfg = app_config.watch
        handlers = HandlerRegistry(app_config.handlers).handlers
        if handlers.is_empty():
            handlers.any_event = print_event
    else:
        if not args.root:
            parser.error("a root directory is required when --config is not given")
        watch_cfg = WatchConfig(root_path=Path(args.root))
        handlers = Handlers(any_event=print_event)

    if args.root:
        watch_cfg.root_path = Path(args.root)
    if args.interval is not None:
        if args.interval <= 0:
            raise ConfigError("--interval must be positive")
        watch_cfg.poll_interval = args.interval
    if args.max_depth is not None:
        if args.max_depth < 0:
            raise ConfigError("--max-depth must be non-negative")
        watch_cfg.max_depth = args.max_depth
    if args.no_follow_symlinks:
        watch_cfg.follow_symlinks = False
    return watch_cfg, handlers


if __name__ == "__main__":
    main()
