"""Logging utilities."""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Any

from rich.logging import RichHandler


_run_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("vaultweaver_run_id", default="-")
_theme_var: contextvars.ContextVar[str] = contextvars.ContextVar("vaultweaver_theme", default="-")


class _ContextFilter(logging.Filter):
    """Inject run and theme context into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.run_id = _run_id_var.get()  # type: ignore[attr-defined]
        record.theme = _theme_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def run_context(*, run_id: str, theme: str | None = None) -> Any:
    """Temporarily bind run context for structured logging.

    Each generation task runs in its own asyncio task, which copies the current
    context on creation, so a theme bound inside a task stays local to it.

    Args:
        run_id: Run identifier.
        theme: Optional theme currently being generated.
    """

    token_run = _run_id_var.set(run_id)
    token_theme = _theme_var.set(theme or _theme_var.get())
    try:
        yield
    finally:
        _run_id_var.reset(token_run)
        _theme_var.reset(token_theme)


def set_theme(theme: str) -> None:
    """Update current theme in context."""

    _theme_var.set(theme)


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Args:
        level: Logging level name.
    """

    handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
    handler.addFilter(_ContextFilter())

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s run=%(run_id)s theme=%(theme)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    # configure_logging may run once per CLI call and once per API app
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(handler)
    else:
        for h in root.handlers:
            if isinstance(h, RichHandler):
                h.addFilter(_ContextFilter())
                h.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)
