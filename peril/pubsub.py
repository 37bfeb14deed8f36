"""Publishing and consuming game messages over AMQP."""

from __future__ import annotations

import json
from enum import IntEnum
from typing import Any, Callable, Protocol, TypeVar

import msgpack
import pika
import pika.exceptions

DEAD_LETTER_EXCHANGE = "peril_dlx"
PREFETCH_COUNT = 10

T = TypeVar("T")


class _Model(Protocol):
    def to_dict(self) -> dict[str, Any]: ...


class PubSubError(Exception):
    """A message could not be encoded, decoded, published or subscribed to."""


class Acktype(IntEnum):
    ACK = 0
    NACK_DISCARD = 1
    NACK_REQUEUE = 2


class SimpleQueueType(IntEnum):
    DURABLE = 0
    TRANSIENT = 1


_DECODE_ERRORS = (ValueError, TypeError, KeyError, AttributeError)


def _as_data(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    return to_dict() if callable(to_dict) else value


def encode_json(value: Any) -> bytes:
    """Serialise a message (or plain data) to JSON bytes."""
    try:
        return json.dumps(_as_data(value)).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise PubSubError(f"could not encode message: {exc}") from exc


def decode_json(body: bytes, model: Any) -> Any:
    """Parse JSON bytes into an instance of ``model``."""
    try:
        return model.from_dict(json.loads(body))
    except _DECODE_ERRORS as exc:
        raise PubSubError(f"could not decode message: {exc}") from exc


def encode_msgpack(value: Any) -> bytes:
    """Serialise a message (or plain data) to MessagePack bytes."""
    try:
        return msgpack.packb(_as_data(value), use_bin_type=True)
    except (TypeError, ValueError, OverflowError) as exc:
        raise PubSubError(f"could not encode message: {exc}") from exc


def decode_msgpack(body: bytes, model: Any) -> Any:
    """Parse MessagePack bytes into an instance of ``model``."""
    try:
        return model.from_dict(msgpack.unpackb(body, raw=False, strict_map_key=False))
    except _DECODE_ERRORS as exc:
        raise PubSubError(f"could not decode message: {exc}") from exc


def _publish(channel: Any, exchange: str, key: str, body: bytes, content_type: str) -> None:
    try:
        channel.basic_publish(
            exchange=exchange,
            routing_key=key,
            body=body,
            properties=pika.BasicProperties(content_type=content_type),
        )
    except pika.exceptions.AMQPError as exc:
        raise PubSubError(f"could not publish message: {exc}") from exc


def publish_json(channel: Any, exchange: str, key: str, value: Any) -> None:
    """Publish ``value`` as JSON to ``exchange`` with routing key ``key``."""
    _publish(channel, exchange, key, encode_json(value), "application/json")


def publish_msgpack(channel: Any, exchange: str, key: str, value: Any) -> None:
    """Publish ``value`` as MessagePack to ``exchange`` with routing key ``key``."""
    _publish(channel, exchange, key, encode_msgpack(value), "application/msgpack")


def declare_and_bind(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
) -> tuple[Any, str]:
    """Open a channel, declare a queue and bind it; return the channel and queue name."""
    try:
        channel = connection.channel()
    except pika.exceptions.AMQPError as exc:
        raise PubSubError(f"could not create channel: {exc}") from exc

    durable = queue_type == SimpleQueueType.DURABLE
    try:
        result = channel.queue_declare(
            queue=queue_name,
            durable=durable,
            auto_delete=not durable,
            exclusive=not durable,
            arguments={"x-dead-letter-exchange": DEAD_LETTER_EXCHANGE},
        )
    except pika.exceptions.AMQPError as exc:
        raise PubSubError(f"could not declare queue: {exc}") from exc

    name = result.method.queue
    try:
        channel.queue_bind(queue=name, exchange=exchange, routing_key=key)
    except pika.exceptions.AMQPError as exc:
        raise PubSubError(f"could not bind queue: {exc}") from exc
    return channel, name


def _subscribe(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
    handler: Callable[[Any], Acktype],
    decode: Callable[[bytes], Any],
) -> Any:
    try:
        channel, name = declare_and_bind(connection, exchange, queue_name, key, queue_type)
    except PubSubError as exc:
        raise PubSubError(f"could not declare and bind queue: {exc}") from exc

    try:
        channel.basic_qos(prefetch_count=PREFETCH_COUNT)
    except pika.exceptions.AMQPError as exc:
        raise PubSubError(f"could not set prefetch settings: {exc}") from exc

    def on_message(ch: Any, method: Any, properties: Any, body: bytes) -> None:
        try:
            target = decode(body)
        except PubSubError as exc:
            print(f"could not unmarshal message: {exc}")
            return
        outcome = handler(target)
        if outcome == Acktype.ACK:
            ch.basic_ack(delivery_tag=method.delivery_tag)
        elif outcome == Acktype.NACK_DISCARD:
            ch.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
        elif outcome == Acktype.NACK_REQUEUE:
            ch.basic_nack(delivery_tag=method.delivery_tag, requeue=True)

    try:
        channel.basic_consume(queue=name, on_message_callback=on_message, auto_ack=False)
    except pika.exceptions.AMQPError as exc:
        raise PubSubError(f"could not consume messages: {exc}") from exc
    return channel


def subscribe_json(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
    handler: Callable[[Any], Acktype],
    model: Any,
) -> Any:
    """Consume JSON messages of type ``model``; return the consuming channel.

    Messages are handed to ``handler`` while the channel consumes, for example
    during ``channel.start_consuming()``.
    """
    return _subscribe(
        connection, exchange, queue_name, key, queue_type, handler,
        lambda body: decode_json(body, model),
    )


def subscribe_msgpack(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
    handler: Callable[[Any], Acktype],
    model: Any,
) -> Any:
    """Consume MessagePack messages of type ``model``; return the consuming channel."""
    return _subscribe(
        connection, exchange, queue_name, key, queue_type, handler,
        lambda body: decode_msgpack(body, model),
    )