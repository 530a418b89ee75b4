# apps/billing/tasks.py
import logging

from celery import shared_task

from .services import auto_approve_participation

logger = logging.getLogger(__name__)


@shared_task
def auto_approve_participation_compensations():
    approved = auto_approve_participation()
    logger.info("Participation auto-approval run finished: %d approved", approved)
    return approved
