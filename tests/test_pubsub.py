from datetime import datetime, timezone
from types import SimpleNamespace

import pika.exceptions
import pytest

from peril.gamedata import ArmyMove, Player, Unit, UnitRank
from peril.pubsub import (
    Acktype,
    PubSubError,
    SimpleQueueType,
    declare_and_bind,
    decode_json,
    decode_msgpack,
    encode_json,
    encode_msgpack,
    publish_json,
    publish_msgpack,
    subscribe_json,
    subscribe_msgpack,
)
from peril.routing import GameLog, PlayingState


class FakeChannel:
    def __init__(self, fail_publish=False):
        self.fail_publish = fail_publish
        self.published = []
        self.declared = []
        self.bound = []
        self.qos = []
        self.consumers = []
        self.acks = []
        self.nacks = []

    def basic_publish(self, exchange, routing_key, body, properties):
        if self.fail_publish:
            raise pika.exceptions.AMQPChannelError("closed")
        self.published.append((exchange, routing_key, body, properties))

    def queue_declare(self, queue, durable, auto_delete, exclusive, arguments):
        self.declared.append(
            dict(queue=queue, durable=durable, auto_delete=auto_delete,
                 exclusive=exclusive, arguments=arguments)
        )
        return SimpleNamespace(method=SimpleNamespace(queue=queue))

    def queue_bind(self, queue, exchange, routing_key):
        self.bound.append((queue, exchange, routing_key))

    def basic_qos(self, prefetch_count):
        self.qos.append(prefetch_count)

    def basic_consume(self, queue, on_message_callback, auto_ack):
        self.consumers.append((queue, on_message_callback, auto_ack))

    def basic_ack(self, delivery_tag):
        self.acks.append(delivery_tag)

    def basic_nack(self, delivery_tag, requeue):
        self.nacks.append((delivery_tag, requeue))


class FakeConnection:
    def __init__(self):
        self.channel_obj = FakeChannel()

    def channel(self):
        return self.channel_obj


class BrokenConnection:
    def channel(self):
        raise pika.exceptions.AMQPConnectionError("down")


def _move():
    unit = Unit(id=1, rank=UnitRank.CAVALRY, location="asia")
    return ArmyMove(player=Player("alice", {1: unit}), units=[unit], to_location="asia")


def test_json_round_trip():
    move = _move()
    assert decode_json(encode_json(move), ArmyMove) == move


def test_msgpack_round_trip():
    log = GameLog(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc), "hi", "bob")
    assert decode_msgpack(encode_msgpack(log), GameLog) == log


def test_json_wire_format():
    assert encode_json(PlayingState(is_paused=True)) == b'{"IsPaused": true}'


def test_decode_json_invalid():
    with pytest.raises(PubSubError):
        decode_json(b"not json", PlayingState)


def test_decode_msgpack_missing_field():
    with pytest.raises(PubSubError):
        decode_msgpack(encode_msgpack({"Other": 1}), PlayingState)


def test_publish_json_sets_content_type():
    channel = FakeChannel()
    publish_json(channel, "peril_direct", "pause", PlayingState(is_paused=False))
    exchange, key, body, properties = channel.published[0]
    assert (exchange, key) == ("peril_direct", "pause")
    assert properties.content_type == "application/json"
    assert decode_json(body, PlayingState) == PlayingState(is_paused=False)


def test_publish_msgpack_round_trip():
    channel = FakeChannel()
    publish_msgpack(channel, "peril_topic", "game_logs.bob", PlayingState(is_paused=True))
    _, _, body, properties = channel.published[0]
    assert properties.content_type == "application/msgpack"
    assert decode_msgpack(body, PlayingState).is_paused is True


def test_publish_failure_raises():
    with pytest.raises(PubSubError):
        publish_json(FakeChannel(fail_publish=True), "x", "y", PlayingState(True))


def test_declare_and_bind_durable():
    connection = FakeConnection()
    channel, name = declare_and_bind(
        connection, "peril_topic", "war", "war.*", SimpleQueueType.DURABLE
    )
    assert name == "war"
    declared = channel.declared[0]
    assert declared["durable"] is True
    assert declared["auto_delete"] is False
    assert declared["exclusive"] is False
    assert declared["arguments"] == {"x-dead-letter-exchange": "peril_dlx"}
    assert channel.bound == [("war", "peril_topic", "war.*")]


def test_declare_and_bind_transient():
    channel, _ = declare_and_bind(
        FakeConnection(), "peril_direct", "pause.bob", "pause", SimpleQueueType.TRANSIENT
    )
    declared = channel.declared[0]
    assert (declared["durable"], declared["auto_delete"], declared["exclusive"]) == (
        False, True, True,
    )


def test_declare_and_bind_channel_failure():
    with pytest.raises(PubSubError):
        declare_and_bind(BrokenConnection(), "x", "q", "k", SimpleQueueType.DURABLE)


@pytest.mark.parametrize(
    "outcome, acks, nacks",
    [
        (Acktype.ACK, [7], []),
        (Acktype.NACK_DISCARD, [], [(7, False)]),
        (Acktype.NACK_REQUEUE, [], [(7, True)]),
    ],
)
def test_subscribe_json_acknowledges(outcome, acks, nacks):
    connection = FakeConnection()
    received = []

    def handler(state):
        received.append(state)
        return outcome

    channel = subscribe_json(
        connection, "peril_direct", "pause.bob", "pause",
        SimpleQueueType.TRANSIENT, handler, PlayingState,
    )
    assert channel.qos == [10]
    queue, callback, auto_ack = channel.consumers[0]
    assert (queue, auto_ack) == ("pause.bob", False)
    callback(channel, SimpleNamespace(delivery_tag=7), None,
             encode_json(PlayingState(is_paused=True)))
    assert received == [PlayingState(is_paused=True)]
    assert channel.acks == acks
    assert channel.nacks == nacks


def test_subscribe_skips_undecodable_message():
    connection = FakeConnection()
    received = []
    channel = subscribe_msgpack(
        connection, "peril_topic", "game_logs", "game_logs.*",
        SimpleQueueType.DURABLE, lambda log: received.append(log) or Acktype.ACK, GameLog,
    )
    _, callback, _ = channel.consumers[0]
    callback(channel, SimpleNamespace(delivery_tag=3), None, b"\xc1")
    assert received == []
    assert channel.acks == [] and channel.nacks == []


def test_subscribe_failure_wraps_error():
    with pytest.raises(PubSubError, match="could not declare and bind queue"):
        subscribe_json(BrokenConnection(), "x", "q", "k", SimpleQueueType.DURABLE,
                       lambda _: Acktype.ACK, PlayingState)