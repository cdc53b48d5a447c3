"""Redis-backed mail queue.

The API pushes jobs onto a Redis list and returns immediately; the worker
(``backend.jobs.worker``) pops them in FIFO order and delivers the mail.

    API → MailQueue.enqueue() → RPUSH → Redis list → BLPOP → worker → Mailer
"""

import json
import logging
from typing import Optional

import redis
from redis.exceptions import RedisError

from backend.core import config
from backend.core.timeutils import utcnow

logger = logging.getLogger(__name__)


class MailQueue:
    def __init__(self, redis_url: str | None = None, queue_name: str | None = None, client=None) -> None:
        self.redis_url = redis_url if redis_url is not None else config.REDIS_URL
        self.queue_name = queue_name or config.MAIL_QUEUE_NAME
        self._client = client
        self._connected_once = client is not None
        self._connection_failed = False

    def get_client(self) -> Optional[redis.Redis]:
        """Return a cached Redis client, reconnecting when the cached one stops answering.

        A failed first connection is treated as misconfiguration and not retried;
        failures after a successful connection are retried on the next call.
        """
        if self._client is not None:
            try:
                self._client.ping()
                return self._client
            except RedisError:
                self._client = None
                logger.debug('Cached Redis client failed ping, reconnecting.')

        if self._connection_failed:
            return None

        if not self.redis_url:
            logger.error('REDIS_URL is not configured; mail jobs cannot be queued.')
            self._connection_failed = True
            return None

        try:
            client = redis.from_url(self.redis_url, decode_responses=True, socket_connect_timeout=5)
            client.ping()
        except (RedisError, ValueError, OSError) as exc:
            if self._connected_once:
                logger.warning('Redis reconnection failed: %s', str(exc)[:200])
            else:
                logger.error('Redis connection failed: %s', str(exc)[:200])
                self._connection_failed = True
            return None

        self._client = client
        self._connected_once = True
        logger.info('Connected to Redis mail queue %s', self.queue_name)
        return client

    def is_connected(self) -> bool:
        return self._client is not None

    def enqueue(self, job_kind: str, payload: dict) -> bool:
        """Push a job for the worker. Failures are logged and reported as ``False``, never raised."""
        client = self.get_client()
        if client is None:
            logger.error('Mail job %s dropped: Redis unavailable.', job_kind)
            return False

        job = {
            'key': job_kind,
            'payload': payload,
            'created_at': utcnow().isoformat(),
        }

        try:
            client.rpush(self.queue_name, json.dumps(job, default=str))
        except RedisError:
            logger.exception('Failed to enqueue mail job %s', job_kind)
            return False

        logger.info('Mail job %s enqueued', job_kind)
        return True

    def dequeue(self, timeout: int = 1) -> Optional[dict]:
        """Pop the oldest job, waiting up to ``timeout`` seconds. Returns ``None`` when idle."""
        client = self.get_client()
        if client is None:
            return None

        try:
            result = client.blpop(self.queue_name, timeout=timeout)
        except RedisError:
            logger.exception('Failed to read from mail queue %s', self.queue_name)
            self._client = None
            return None

        if not result:
            return None

        _, raw_job = result
        try:
            return json.loads(raw_job)
        except json.JSONDecodeError:
            logger.error('Discarding malformed mail job: %s', raw_job[:200])
            return None


_mail_queue: MailQueue | None = None


def get_mail_queue() -> MailQueue:
    global _mail_queue

    if _mail_queue is None:
        _mail_queue = MailQueue()
    return _mail_queue
