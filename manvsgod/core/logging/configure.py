"""Wire the game log store and error sink into the ``manvsgod`` logger."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from manvsgod.core.config import ManVsGodConfig
from manvsgod.core.logging.handler import LogCaptureHandler
from manvsgod.core.logging.sink import FormErrorSink, QueuedFormSink
from manvsgod.core.logging.store import GameLogStore


ROOT_LOGGER = "manvsgod"


def setup_logging(
    config: ManVsGodConfig,
    store: Optional[GameLogStore] = None,
    form_client: Optional[httpx.Client] = None,
) -> GameLogStore:
    """
    Configure the package logger and return the store it captures into.

    Calling it again replaces the handlers installed by a previous call;
    a replaced form sink drains its queue before closing.
    """
    store = store or GameLogStore(max_size=config.max_logs)
    pkg_logger = logging.getLogger(ROOT_LOGGER)
    pkg_logger.setLevel(config.log_level)

    for handler in list(pkg_logger.handlers):
        if isinstance(handler, (LogCaptureHandler, QueuedFormSink)):
            pkg_logger.removeHandler(handler)
            handler.close()

    capture_level = logging.DEBUG if config.debug else logging.INFO
    pkg_logger.addHandler(LogCaptureHandler(store, level=capture_level))

    if config.error_form_url:
        sink = FormErrorSink(
            config.error_form_url,
            field=config.error_form_field,
            session_id=store.session_id,
            client=form_client,
        )
        pkg_logger.addHandler(QueuedFormSink(sink))

    return store
