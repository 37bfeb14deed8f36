"""Message handlers used by the game server."""

from __future__ import annotations

import os
from typing import Callable

from peril.logs import LOGS_FILE, write_log
from peril.pubsub import Acktype
from peril.routing import GameLog


def handler_logs(path: str | os.PathLike[str] = LOGS_FILE) -> Callable[[GameLog], Acktype]:
    """Build a handler that appends received game logs to ``path``."""

    def handle(gamelog: GameLog) -> Acktype:
        try:
            write_log(gamelog, path)
        except OSError as exc:
            print(f"error writing log: {exc}")
            return Acktype.NACK_REQUEUE
        finally:
            print("> ", end="", flush=True)
        return Acktype.ACK

    return handle