"""Appending game logs to disk."""

from __future__ import annotations

import logging
import os
import time
from datetime import datetime

from peril.routing import GameLog

LOGS_FILE = "game.log"
WRITE_TO_DISK_SLEEP = 1.0

_logger = logging.getLogger(__name__)


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    text = moment.replace(microsecond=0).isoformat()
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def write_log(gamelog: GameLog, path: str | os.PathLike[str] = LOGS_FILE) -> None:
    """Append one line for ``gamelog`` to the log file, after a deliberate delay."""
    _logger.info("received game log...")
    time.sleep(WRITE_TO_DISK_SLEEP)
    line = f"{_rfc3339(gamelog.current_time)} {gamelog.username}: {gamelog.message}\n"
    with open(path, "a", encoding="utf-8") as handle:
        handle.write(line)