"""
RQ queue configuration and utilities.
Provides Redis connection and queue instances for job management.
"""

from typing import Any, Callable

from redis import Redis
from rq import Queue

from taskerai.core.config import settings
from taskerai.core.logging import get_logger

logger = get_logger(__name__)

# Redis connection for RQ
redis_conn = Redis(
    host=settings.REDIS_HOST,
    port=settings.REDIS_PORT,
    db=settings.REDIS_DB,
)

# Emails and sweeps share one queue; run workers with `rq worker <RQ_QUEUE>`
default_queue = Queue(settings.RQ_QUEUE, connection=redis_conn)


def enqueue_task(func: Callable[..., Any], *args: Any, **kwargs: Any) -> str:
    """
    Enqueue a background task.
    Raises redis.exceptions.RedisError when Redis cannot be reached; callers
    that must not fail decide on a fallback.

    Args:
        func: Function to execute
        *args: Positional arguments for the function
        **kwargs: Keyword arguments for the function

    Returns:
        Job ID
    """
    job = default_queue.enqueue(func, *args, **kwargs)
    logger.info(f"Enqueued task {func.__name__} with job ID: {job.id}")
    return job.id
