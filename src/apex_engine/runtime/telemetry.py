"""Logging for edits, undo and file I/O, on top of telelog.

Buffer, expression and action code never raises for an ordinary editing
failure; it returns a :class:`~apex_engine.buffer.Status`. Telemetry follows
the same shape. Each fallible operation runs inside :func:`span`, which
profiles it and tags every log line with the operation's metadata (the
range an action targets, the path a file call touches). A bad status is
reported through :meth:`SpanHandle.reject`; only an exception escaping the
block is logged as a span failure.

Settings come from ``APEX_ENGINE_*`` environment variables the first time a
logger is needed. :func:`configure` swaps them for explicit ones.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

import telelog  # type: ignore[import]

ENV_PREFIX = "APEX_ENGINE_"
LOGGER_NAME = "apex_engine"

_logger: Optional[Any] = None
_settings: Optional["Settings"] = None
# Per-key stack of span context values; the top one is what the logger holds.
_context_stack: Dict[str, List[str]] = {}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(f"{ENV_PREFIX}{name}")
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("latin-1")
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


@dataclass(frozen=True)
class Settings:
    """Logger settings; :meth:`from_env` reads the ``APEX_ENGINE_*`` variables."""

    level: str = "WARNING"
    console: bool = True
    color: bool = True
    json: bool = False
    log_file: str = ""
    profile: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            level=(os.getenv(f"{ENV_PREFIX}LOG_LEVEL") or "WARNING").upper(),
            console=not _env_flag("DISABLE_CONSOLE", False),
            color=not _env_flag("NO_COLOR", False),
            json=_env_flag("LOG_JSON", False),
            log_file=os.getenv(f"{ENV_PREFIX}LOG_FILE", ""),
            profile=_env_flag("PROFILE", False),
        )

    def to_config(self) -> Any:
        config = telelog.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.color)
        if self.json:
            config.with_json_format(True)
        if self.log_file:
            config.with_file_output(self.log_file)
        config.with_profiling(self.profile)
        return config


def configure(settings: Optional[Settings] = None) -> None:
    """Use ``settings`` (or a fresh read of the environment) from now on."""

    global _logger, _settings
    _settings = settings or Settings.from_env()
    _logger = None
    _context_stack.clear()


def get_logger() -> Any:
    global _logger
    if _logger is None:
        settings = _settings or Settings.from_env()
        _logger = telelog.Logger.with_config(LOGGER_NAME, settings.to_config())
    return _logger


def _emit(logger: Any, level: str, message: str, payload: Dict[str, str]) -> None:
    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        structured(message, list(payload.items()))
        return
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str, *, level: str = "info", data: Optional[Dict[str, Any]] = None
) -> None:
    """Log ``event::<name>`` with ``data`` as structured fields."""

    payload = {"event": name}
    payload.update({key: _stringify(value) for key, value in (data or {}).items()})
    _emit(get_logger(), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def _report(self, level: str, message: str, reason: str) -> None:
        payload = {"span": self.name, **self.metadata, "reason": reason}
        if self.component:
            payload["component"] = self.component
        _emit(self.logger, level, message, payload)

    def reject(self, reason: str) -> None:
        """The operation finished but returned a failed status."""

        self._report("warning", "span::reject", reason)

    def fail(self, reason: str) -> None:
        self._report("error", "span::fail", reason)


def _push_context(logger: Any, key: str, value: str) -> None:
    _context_stack.setdefault(key, []).append(value)
    logger.add_context(key, value)


def _pop_context(logger: Any, key: str) -> None:
    values = _context_stack.get(key)
    if values:
        values.pop()
    if values:
        logger.add_context(key, values[-1])
    else:
        _context_stack.pop(key, None)
        logger.remove_context(key)


@contextmanager
def span(
    name: str,
    *,
    component: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile one engine operation named like ``action::replace``.

    ``metadata`` becomes logger context for the duration of the block; an
    enclosing span's values for the same keys are restored afterwards.
    ``component`` groups the operation under telelog component tracking.
    """

    log = get_logger()
    tags = {key: _stringify(value) for key, value in (metadata or {}).items()}
    for key, value in tags.items():
        _push_context(log, key, value)
    handle = SpanHandle(log, name, component, dict(tags))

    try:
        with ExitStack() as stack:
            if component:
                stack.enter_context(log.track_component(component))
            stack.enter_context(log.profile(name))
            try:
                yield handle
            except Exception as exc:
                handle.fail(str(exc))
                raise
    finally:
        for key in tags:
            _pop_context(log, key)


__all__ = [
    "ENV_PREFIX",
    "Settings",
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
