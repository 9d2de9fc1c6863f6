"""Structured logging via structlog.

Library modules log through `logging.getLogger(__name__)`. Applications
that embed the bundler call `configure_structlog()` once at startup; it
installs a root handler whose `structlog.stdlib.ProcessorFormatter` runs
every stdlib record through the same processors as structlog events.

Renderer selection (`debug` defaults to `Settings.debug`):
  debug=True:  `ConsoleRenderer`, coloured when the stream is a terminal.
  debug=False: `JSONRenderer`, one object per line for CI logs.

ContextVar injection:
  `BundlePipeline.create_zip_archive()` binds the bundle name to
  `_bundle_id_var` for the duration of a run, so every record emitted
  during that run carries a `bundle_id` field.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, TextIO

import structlog

from ptbundler.core.config import get_settings

_bundle_id_var: ContextVar[str] = ContextVar("bundle_id", default="")

# Handler installed by the last configure_structlog() call
_handler: Optional[logging.Handler] = None


def get_bundle_id() -> str:
    """Return the bundle currently being built, or empty string if none."""
    return _bundle_id_var.get()


@contextmanager
def bind_bundle_id(bundle_id: str) -> Iterator[None]:
    """Bind `bundle_id` to the logging context for the enclosed block."""
    token = _bundle_id_var.set(bundle_id)
    try:
        yield
    finally:
        _bundle_id_var.reset(token)


def _inject_context_vars(
    logger: logging.Logger,
    method: str,
    event_dict: dict,
) -> dict:
    """Structlog processor: inject bundle_id from the ContextVar."""
    bundle_id = get_bundle_id()
    if bundle_id:
        event_dict["bundle_id"] = bundle_id
    return event_dict


def configure_structlog(
    debug: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """Route structlog and stdlib logging through one processor chain.

    Replaces the handler from any previous call, so calling this again
    switches renderer or stream. Returns the installed root handler.
    """
    global _handler

    if debug is None:
        debug = get_settings().debug
    stream = stream or sys.stdout

    shared_processors: list = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _inject_context_vars,
        structlog.processors.StackInfoRenderer(),
    ]

    if debug:
        render_chain: list = [structlog.dev.ConsoleRenderer(colors=stream.isatty())]
    else:
        render_chain = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta] + render_chain,
        )
    )

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    _handler = handler
    return handler
