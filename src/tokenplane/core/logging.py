"""Structured logging for scans, audits and applies.

Every event carries the ``run_id`` of the command that produced it and,
once a project is open, its ``project_id``, so one ``tpl apply`` can be
followed across extraction, validation and the version snapshot.

Console handlers go quiet while a rich spinner owns the terminal; file
handlers keep their own level.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from tokenplane.config.models import LoggingConfig, LogOutputConfig

_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)

_CONSOLE_DESTINATIONS = ("stderr", "stdout")
_NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


def current_run_id() -> str | None:
    return _run_id.get()


def begin_run(project_id: str | None = None, run_id: str | None = None) -> str:
    """Start a correlated run; returns its id (generated when not given)."""
    rid = run_id or uuid4().hex[:12]
    _run_id.set(rid)
    if project_id is not None:
        structlog.contextvars.bind_contextvars(project_id=project_id)
    return rid


def end_run() -> None:
    _run_id.set(None)
    structlog.contextvars.unbind_contextvars("project_id")


def _add_run_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if rid := current_run_id():
        event_dict.setdefault("run_id", rid)
    return event_dict


def _level(name: str | None, fallback: int = logging.INFO) -> int:
    if not name:
        return fallback
    # Unknown names come back as the string "Level <name>"
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else fallback


class SpinnerAwareFilter(logging.Filter):
    """Hold back console records while a spinner is drawing."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        from tokenplane.core.progress import is_console_suppressed

        return not is_console_suppressed()


def _formatter(
    output: LogOutputConfig, pre_chain: list[structlog.types.Processor]
) -> logging.Formatter:
    if output.format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        stream = sys.stdout if output.destination == "stdout" else sys.stderr
        renderer = structlog.dev.ConsoleRenderer(
            colors=output.destination in _CONSOLE_DESTINATIONS and stream.isatty(),
            pad_event_to=0,
            pad_level=False,
        )
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _handler(output: LogOutputConfig) -> logging.Handler:
    handler: logging.Handler
    if output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output.destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        path = Path(output.destination).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        return handler
    handler.addFilter(SpinnerAwareFilter())
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Route structlog through stdlib logging to the configured outputs.

    ``config`` wins over ``json_format``/``level``, which only describe a
    single stderr output.
    """
    from tokenplane.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    root_level = _level(config.level)

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_run_id,  # type: ignore[list-item]
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration (tests, -v) must take effect on existing loggers
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    for output in config.outputs:
        handler = _handler(output)
        handler.setLevel(_level(output.level, root_level))
        handler.setFormatter(_formatter(output, pre_chain))
        root.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger bound to ``logger=<name>`` (e.g. ``"registry.ingest"``)."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
