"""telelog wiring for styled-text.

Loggers are configured from ``STYLED_TEXT_*`` environment variables the first
time one is requested. Replaces report through :func:`replace_span`, which
profiles the pipeline and logs how many reference spans it produced and how
the subject length changed; everything else goes through :func:`record_event`.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "STYLED_TEXT_"
DEFAULT_LOGGER_NAME = "styled_text"
DEFAULT_BUFFER_SIZE = 2048

_LOGGERS: MutableMapping[str, Any] = {}
_CONFIG: Optional[Any] = None


def _setting(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _enabled(name: str) -> bool:
    raw = _setting(name)
    return raw is not None and raw.strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> Any:
    """Build a ``telelog.Config`` from the environment.

    ``LOG_LEVEL`` defaults to ``WARNING`` so replaces stay silent unless
    asked; ``LOG_FILE``, ``LOG_JSON``, ``LOG_BUFFERED``/``LOG_BUFFER_SIZE``,
    ``DISABLE_CONSOLE`` and ``NO_COLOR`` toggle the matching outputs.
    """

    config = tl.Config()
    config.with_min_level((_setting("LOG_LEVEL") or "WARNING").upper())

    console = not _enabled("DISABLE_CONSOLE")
    config.with_console_output(console)
    if console:
        config.with_colored_output(not _enabled("NO_COLOR"))
    if _enabled("LOG_JSON"):
        config.with_json_format(True)

    log_file = _setting("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)
    if _enabled("LOG_BUFFERED"):
        config.with_buffering(True)
        config.with_buffer_size(int(_setting("LOG_BUFFER_SIZE") or DEFAULT_BUFFER_SIZE))

    # replace_span relies on logger.profile
    config.with_profiling(True)
    return config


def configure(config: Optional[Any] = None) -> None:
    """Adopt ``config`` (or re-read the environment) and drop cached loggers."""

    global _CONFIG
    _CONFIG = config if config is not None else load_config()
    _LOGGERS.clear()


def get_logger(name: Optional[str] = None) -> Any:
    global _CONFIG
    logger_name = name or _setting("LOGGER") or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGERS:
        if _CONFIG is None:
            _CONFIG = load_config()
        _LOGGERS[logger_name] = tl.Logger.with_config(logger_name, _CONFIG)
    return _LOGGERS[logger_name]


def _pairs(data: Dict[str, Any]) -> List[Tuple[str, str]]:
    return [
        (str(key), value if isinstance(value, str) else repr(value))
        for key, value in data.items()
    ]


def _emit(logger: Any, level: str, message: str, data: Dict[str, Any]) -> None:
    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        structured(message, _pairs(data))
        return
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {data}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` as key/value pairs."""

    _emit(
        get_logger(logger_name),
        level.lower(),
        f"event::{name}",
        {"event": name, **(data or {})},
    )


@dataclass(slots=True)
class ReplaceStats:
    """Filled in by the replace pipeline while a :func:`replace_span` is open."""

    kind: str
    subject_length: int
    span_count: int = 0
    new_length: Optional[int] = None

    def record(self, span_count: int, new_length: Optional[int]) -> None:
        self.span_count = span_count
        self.new_length = new_length

    def as_data(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "kind": self.kind,
            "subject_length": self.subject_length,
            "spans": self.span_count,
        }
        if self.new_length is not None:
            data["new_length"] = self.new_length
        return data


@contextmanager
def replace_span(
    kind: str, subject_length: int, *, logger_name: Optional[str] = None
) -> Iterator[ReplaceStats]:
    """Profile one replace as ``replace::<kind>``.

    Logs ``replace::done`` at debug level with the recorded stats, or
    ``replace::fail`` at error level before re-raising.
    """

    logger = get_logger(logger_name)
    stats = ReplaceStats(kind=kind, subject_length=subject_length)
    with logger.profile(f"replace::{kind}"):
        try:
            yield stats
        except Exception as exc:
            _emit(logger, "error", "replace::fail", {**stats.as_data(), "reason": str(exc)})
            raise
    _emit(logger, "debug", "replace::done", stats.as_data())


__all__ = [
    "ReplaceStats",
    "configure",
    "get_logger",
    "load_config",
    "record_event",
    "replace_span",
]
