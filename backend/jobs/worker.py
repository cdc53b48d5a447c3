"""Mail worker: pops queued jobs and runs the matching handler.

Usage:
    python -m backend.jobs.worker
"""
import logging
import signal
import time
from typing import Callable

from backend.core import config
from backend.jobs import cancellation_mail
from backend.jobs.queue import MailQueue, get_mail_queue

logger = logging.getLogger(__name__)

RECONNECT_DELAY_SECONDS = 1

JOBS: dict[str, Callable[[dict], None]] = {
    cancellation_mail.KEY: cancellation_mail.handle,
}


def process_job(job: dict, handlers: dict[str, Callable[[dict], None]] | None = None) -> bool:
    handlers = JOBS if handlers is None else handlers
    key = job.get('key')
    handler = handlers.get(key)
    if handler is None:
        logger.error('No handler registered for mail job %s', key)
        return False

    try:
        handler(job.get('payload') or {})
    except Exception:
        logger.exception('Mail job %s failed', key)
        return False

    logger.info('Mail job %s processed', key)
    return True


def run(
    queue: MailQueue | None = None,
    should_stop: Callable[[], bool] = lambda: False,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    queue = queue or get_mail_queue()
    logger.info('Mail worker listening on %s', queue.queue_name)
    while not should_stop():
        job = queue.dequeue()
        if job is not None:
            process_job(job)
        elif not queue.is_connected():
            sleep(RECONNECT_DELAY_SECONDS)


def main() -> None:
    config.configure_logging()
    stopping = False

    def _stop(signum, frame) -> None:
        nonlocal stopping
        logger.info('Received signal %s, shutting down mail worker.', signum)
        stopping = True

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)
    run(should_stop=lambda: stopping)


if __name__ == '__main__':
    main()
