from __future__ import annotations

import json
import logging
from typing import Any, Optional


LOG_FORMAT = '%(asctime)s [%(levelname)s]: %(message)s'
EVENT_LOGGER_NAME = 'transmission_client.events'


def setup_logging(debug_logging: bool = False) -> logging.Logger:
    """Configure the root logger and return the dedicated event logger.

    The event logger does not propagate to root so structured lines are not
    printed twice, and it always carries exactly one handler even when this
    is called more than once.
    """
    level = logging.DEBUG if debug_logging else logging.INFO
    logging.basicConfig(
        format=LOG_FORMAT,
        level=level,
        handlers=[logging.StreamHandler()],
        force=True,
    )
    event_log = logging.getLogger(EVENT_LOGGER_NAME)
    event_log.setLevel(level)
    event_log.propagate = False
    for _h in list(event_log.handlers):
        event_log.removeHandler(_h)
    _h = logging.StreamHandler()
    _h.setFormatter(logging.Formatter(LOG_FORMAT))
    event_log.addHandler(_h)
    return event_log


class EventBus:
    def __init__(
        self,
        *,
        structured_logs: bool = True,
        debug_logging: bool = False,
        logger: Optional[Any] = None,
    ) -> None:
        self.structured_logs = structured_logs
        self.debug_logging = debug_logging
        self.logger = logger if logger is not None else logging.getLogger(EVENT_LOGGER_NAME)

    def log(self, event: str, **fields) -> None:
        payload = {"event": event, **fields}
        try:
            if self.structured_logs:
                self.logger.info(json.dumps(payload, ensure_ascii=False))
            else:
                self.logger.info(f"{event}: {fields}")
        except (TypeError, ValueError):
            self.logger.info(str(payload))

    def debug(self, event: str, **fields) -> None:
        if self.debug_logging:
            self.log(event, **fields)
