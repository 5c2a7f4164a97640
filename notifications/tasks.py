import logging

from celery import shared_task
from django.db import transaction

from .dispatcher import dispatch

logger = logging.getLogger(__name__)


@shared_task
def dispatch_notifications_task(candidates):
    notifications = dispatch(candidates)
    logger.info(f"Delivered {len(notifications)} of {len(candidates)} notifications")
    return [notification.id for notification in notifications]


def _enqueue(candidates):
    try:
        dispatch_notifications_task.delay(candidates)
    except Exception:
        logger.exception(f"Could not enqueue {len(candidates)} notifications")


def emit(resolve, *args, **kwargs):
    """
    Resolve recipients now and hand them to the worker once the surrounding
    transaction commits. Never raises: a broken fan-out must not fail the
    moderation action that triggered it.
    """
    try:
        # Own savepoint: a failed lookup rolls back only itself.
        with transaction.atomic():
            candidates = resolve(*args, **kwargs)
    except Exception:
        logger.exception(f"Could not resolve notification recipients with {getattr(resolve, '__name__', resolve)}")
        return []

    if candidates:
        transaction.on_commit(lambda: _enqueue(candidates))
    return candidates
