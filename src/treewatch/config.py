"""Configuration loading utilities for the directory watcher."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml  # type: ignore

from .events import EventType


logger = logging.getLogger(__name__)

ANY_EVENT = "any"


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


@dataclass
class WatchConfig:
    """Options describing how the watched tree should be polled."""

    root_path: Path
    poll_interval: float = 1.0
    max_depth: Optional[int] = None
    follow_symlinks: bool = True


@dataclass
class HandlerConfig:
    """Callback bound to one event type (or ``any``) by the configuration file."""

    event: str
    module: str
    function: str
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AppConfig:
    """Top-level configuration structure."""

    watch: WatchConfig
    handlers: List[HandlerConfig] = field(default_factory=list)


def load_config(path: Path) -> AppConfig:
    """Load and validate the YAML configuration file."""

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML configuration: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    watch_cfg = _parse_watch_config(data.get("watch"), config_path=path)
    handlers_cfg = _parse_handlers_config(data.get("handlers", []))

    return AppConfig(watch=watch_cfg, handlers=handlers_cfg)


def _parse_watch_config(raw: Any, *, config_path: Path) -> WatchConfig:
    if not isinstance(raw, dict):
        raise ConfigError("'watch' section must be a mapping")

    root_path_raw = raw.get("root_path")
    if not isinstance(root_path_raw, str):
        raise ConfigError("watch.root_path must be a string")

    root_path = Path(root_path_raw)
    if not root_path.is_absolute():
        root_path = (config_path.parent / root_path).resolve()

    poll_interval = raw.get("poll_interval", 1.0)
    if isinstance(poll_interval, bool):
        raise ConfigError("watch.poll_interval must be numeric")
    try:
        poll_interval_val = float(poll_interval)
    except (TypeError, ValueError) as exc:
        raise ConfigError("watch.poll_interval must be numeric") from exc
    if poll_interval_val <= 0:
        raise ConfigError("watch.poll_interval must be positive")

    max_depth = raw.get("max_depth")
    if max_depth is not None:
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
            raise ConfigError("watch.max_depth must be a non-negative integer")

    follow_flag = raw.get("follow_symlinks", True)
    if not isinstance(follow_flag, bool):
        raise ConfigError("watch.follow_symlinks must be a boolean")

    return WatchConfig(
        root_path=root_path,
        poll_interval=poll_interval_val,
        max_depth=max_depth,
        follow_symlinks=follow_flag,
    )


def _parse_handlers_config(raw: Any) -> List[HandlerConfig]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError("'handlers' section must be a list")

    allowed = {event_type.value for event_type in EventType} | {ANY_EVENT}
    handlers: List[HandlerConfig] = []
    seen: Dict[str, int] = {}
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ConfigError(f"handlers[{index}] must be a mapping")

        event = item.get("event")
        module = item.get("module")
        function = item.get("function")
        options = item.get("options", {})

        if event not in allowed:
            choices = ", ".join(sorted(allowed))
            raise ConfigError(f"handlers[{index}].event must be one of: {choices}")
        if event in seen:
            raise ConfigError(
                f"handlers[{index}] duplicates the '{event}' handler from handlers[{seen[event]}]"
            )
        if not isinstance(module, str) or not isinstance(function, str):
            raise ConfigError(f"handlers[{index}] must include 'module' and 'function' strings")
        if options is None:
            options = {}
        if not isinstance(options, dict):
            raise ConfigError(f"handlers[{index}].options must be a mapping if provided")

        handler_cfg = HandlerConfig(event=event, module=module, function=function, options=options)
        logger.info(
            "Loaded handler for '%s' (%s.%s)",
            handler_cfg.event,
            handler_cfg.module,
            handler_cfg.function,
        )
        seen[event] = index
        handlers.append(handler_cfg)

    return handlers
