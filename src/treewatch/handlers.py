"""Dynamic loading of configured event handlers."""
from __future__ import annotations

import functools
import importlib
import logging
from dataclasses import fields
from types import ModuleType
from typing import Callable, Iterable, List

from .config import ANY_EVENT, HandlerConfig
from .differ import Handlers

logger = logging.getLogger(__name__)

_HANDLER_SLOTS = frozenset(item.name for item in fields(Handlers))


class HandlerRegistry:
    """Imports configured callbacks and arranges them into :class:`Handlers`."""

    def __init__(self, configs: Iterable[HandlerConfig]):
        self._configs: List[HandlerConfig] = list(configs)
        self._handlers = Handlers()
        for config in self._configs:
            attribute = "any_event" if config.event == ANY_EVENT else config.event
            if attribute not in _HANDLER_SLOTS:
                raise RuntimeError(
                    f"Handler for '{config.event}' ({config.module}.{config.function}) names an unknown event"
                )
            callback = self._load_callback(config)
            setattr(self._handlers, attribute, callback)

    def __iter__(self):
        return iter(self._configs)

    def __len__(self) -> int:
        return len(self._configs)

    @property
    def handlers(self) -> Handlers:
        return self._handlers

    def _load_callback(self, config: HandlerConfig) -> Callable[..., object]:
        module = _import_module(config.module)
        try:
            callback = getattr(module, config.function)
        except AttributeError as exc:
            raise RuntimeError(
                f"Handler for '{config.event}' could not find function '{config.function}' in {config.module}"
            ) from exc

        if not callable(callback):
            raise RuntimeError(
                f"Handler for '{config.event}' attribute '{config.function}' in {config.module} is not callable"
            )

        logger.debug("Bound %s.%s to '%s'", config.module, config.function, config.event)
        if config.options:
            return functools.partial(callback, **config.options)
        return callback


def _import_module(module_path: str) -> ModuleType:
    try:
        return importlib.import_module(module_path)
    except ImportError as exc:
        raise RuntimeError(f"Unable to import handler module '{module_path}'") from exc
