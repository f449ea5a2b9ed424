from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncContextManager

from fastapi import FastAPI

from taxwise.config import get_settings

Hook = Callable[[FastAPI], Awaitable[None] | None]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def _open_log_sink(logger: logging.Logger, log_dir: str | None, app_label: str) -> logging.Handler | None:
    if not log_dir:
        logger.debug("No log directory configured; file logging disabled")
        return None
    logs_dir = Path(log_dir)
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning("Unable to create logs directory %s: %s", logs_dir, exc)
        return None
    handler = logging.FileHandler(logs_dir / f"{app_label}.log", encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return handler


async def _invoke_hook(hook: Hook | None, app: FastAPI) -> None:
    if hook is None:
        return
    try:
        result = hook(app)
        if inspect.isawaitable(result):
            await result  # type: ignore[func-returns-value]
    except Exception:  # pragma: no cover - hooks are user provided
        logging.getLogger("taxwise").exception("Application lifecycle hook failed")


def build_application_lifespan(
    app_label: str,
    *,
    startup_hook: Hook | None = None,
    shutdown_hook: Hook | None = None,
) -> Callable[[FastAPI], AsyncContextManager[None]]:
    base_logger = logging.getLogger("taxwise")

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        settings = get_settings()
        logger = base_logger.getChild(app_label)
        level_was_unset = base_logger.level == logging.NOTSET
        if level_was_unset:
            base_logger.setLevel(logging.INFO)
        log_handler = _open_log_sink(base_logger, settings.log_dir, app_label)

        app.state.settings = settings
        app.state.log_handler = log_handler
        app.state.app_label = app_label

        logger.info(
            "Startup complete: version=%s records_enabled=%s file_logging=%s",
            settings.build_version,
            settings.feature_calculation_records,
            log_handler is not None,
        )

        try:
            await _invoke_hook(startup_hook, app)
            yield
        finally:
            await _invoke_hook(shutdown_hook, app)
            logger.info("Shutdown complete")
            if log_handler is not None:
                base_logger.removeHandler(log_handler)
                log_handler.close()
            if level_was_unset:
                base_logger.setLevel(logging.NOTSET)
            for attr in ("settings", "log_handler", "app_label"):
                if hasattr(app.state, attr):
                    delattr(app.state, attr)

    return _lifespan
