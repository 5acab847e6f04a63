import logging

from status_relay.core.models import (
    DEFAULT_COMPLETE_SUBTITLE,
    DEFAULT_COMPLETE_TITLE,
    NO_CLIENT_REASON,
    CompletionUpdate,
    DeliveryResult,
    StatusUpdate,
    utc_timestamp,
)
from status_relay.core.registry import SubscriberRegistry
from status_relay.errors import InvalidRequest

logger = logging.getLogger("status_relay.relay")


def build_status_event(update: StatusUpdate) -> dict:
    return {
        "type": "status_update",
        "jobId": update.jobId,
        "status": update.status,  # processing | complete | error, not enforced
        "title": update.title,
        "subtitle": update.subtitle or "",
        "timestamp": utc_timestamp(),
    }


def build_completion_event(update: CompletionUpdate) -> dict:
    return {
        "type": "job_complete",
        "jobId": update.jobId,
        "status": "complete",
        "title": update.title or DEFAULT_COMPLETE_TITLE,
        "subtitle": update.subtitle or DEFAULT_COMPLETE_SUBTITLE,
        "filesUrl": update.filesUrl or None,
        "details": update.details or {},
        "timestamp": utc_timestamp(),
    }


def publish_status(registry: SubscriberRegistry, update: StatusUpdate) -> DeliveryResult:
    if not update.jobId:
        raise InvalidRequest("Missing required field: jobId")
    if not update.status or not update.title:
        raise InvalidRequest("Missing required fields: status, title")

    if registry.publish(update.jobId, build_status_event(update)):
        logger.info("Sent status to job=%s title=%r", update.jobId, update.title)
        return DeliveryResult(delivered=True)

    logger.warning("No client connected for job=%s", update.jobId)
    return DeliveryResult(delivered=False, reason=NO_CLIENT_REASON)


def publish_completion(registry: SubscriberRegistry, update: CompletionUpdate) -> DeliveryResult:
    # subscription stays registered after completion; the client closes it
    if not update.jobId:
        raise InvalidRequest("Missing required field: jobId")

    event = build_completion_event(update)
    if registry.publish(update.jobId, event):
        logger.info(
            "Job complete job=%s title=%r files_url=%s",
            update.jobId, event["title"], event["filesUrl"] or "-",
        )
        return DeliveryResult(delivered=True)

    logger.warning("No client connected for job=%s", update.jobId)
    return DeliveryResult(delivered=False, reason=NO_CLIENT_REASON)
