from __future__ import annotations

import logging
from typing import Final

from ports.ipc import EventSubPort

from apps.viewer.settings import ViewerSettings

LOG: Final = logging.getLogger("viewer")


def build_sub(settings: ViewerSettings) -> EventSubPort:
    """Connect a SUB socket to the capture process's progress endpoint."""
    from adapters.ipc_zmq import ZmqEventSubPort

    sub = ZmqEventSubPort()
    sub.subscribe(settings.progress_sub)
    LOG.info("Subscribed to capture events at %s", settings.progress_sub)
    return sub
