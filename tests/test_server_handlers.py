from datetime import datetime, timezone

import pytest

from peril import logs
from peril.pubsub import Acktype
from peril.routing import GameLog
from peril.server_handlers import handler_logs


@pytest.fixture(autouse=True)
def _no_delay(monkeypatch):
    monkeypatch.setattr(logs, "WRITE_TO_DISK_SLEEP", 0)


def _log(message):
    return GameLog(datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc), message, "alice")


def test_logs_are_appended(tmp_path):
    path = tmp_path / "game.log"
    handle = handler_logs(path)
    assert handle(_log("first")) == Acktype.ACK
    assert handle(_log("second")) == Acktype.ACK
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == [
        "2024-05-06T07:08:09Z alice: first",
        "2024-05-06T07:08:09Z alice: second",
    ]


def test_write_failure_requeues(tmp_path):
    handle = handler_logs(tmp_path)
    assert handle(_log("lost")) == Acktype.NACK_REQUEUE