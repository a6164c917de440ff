"""The AMQP queues linking the service with the execution worker."""

from __future__ import annotations

import json
import logging
import threading
import uuid
from collections.abc import Callable
from typing import Any

import pika

from vjudge.config import MQConfig
from vjudge.judging import ExecRequest

logger = logging.getLogger(__name__)

MessageHandler = Callable[[bytes, str], None]


class JudgeQueue:
    """Publishes judging jobs and consumes the worker's status replies."""

    def __init__(self, channel: Any, queue_name: str, reply_queue_name: str) -> None:
        self._channel = channel
        self.queue_name = queue_name
        self.reply_queue_name = reply_queue_name
        self._lock = threading.Lock()

    def send(self, request: ExecRequest) -> str:
        """Publish *request* and return the correlation id of the job."""
        body = json.dumps(request.to_dict(), separators=(",", ":"), ensure_ascii=False)
        correlation_id = str(uuid.uuid4())
        properties = pika.BasicProperties(
            content_type="application/json",
            correlation_id=correlation_id,
            reply_to=self.reply_queue_name,
        )
        with self._lock:
            self._channel.basic_publish(
                exchange="",
                routing_key=self.queue_name,
                body=body.encode("utf-8"),
                properties=properties,
            )
        return correlation_id

    def consume(self, handler: MessageHandler) -> None:
        """Acknowledge each reply and pass its body and correlation id to *handler*."""

        def on_message(channel: Any, method: Any, properties: Any, body: bytes) -> None:
            channel.basic_ack(delivery_tag=method.delivery_tag)
            correlation_id = getattr(properties, "correlation_id", None) or ""
            try:
                handler(body, correlation_id)
            except Exception:
                logger.exception("consume(): failed to handle reply %s", correlation_id)

        self._channel.basic_consume(
            queue=self.reply_queue_name, on_message_callback=on_message, auto_ack=False
        )
        self._channel.start_consuming()


def connect(config: MQConfig | None) -> JudgeQueue:
    """Open a channel, declare the exclusive reply queue and return the queue pair."""
    if config is None:
        raise ValueError("config file failed - MQ")
    connection = pika.BlockingConnection(pika.URLParameters(config.url()))
    channel = connection.channel()
    declared = channel.queue_declare(
        queue="", durable=True, exclusive=True, auto_delete=False
    )
    channel.basic_qos(prefetch_count=1)
    logger.info("Init message queue successfully")
    return JudgeQueue(channel, config.queue_name, declared.method.queue)