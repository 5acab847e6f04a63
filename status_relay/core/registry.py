import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from status_relay.core.models import CONNECTED_MESSAGE, Subscription
from status_relay.errors import ChannelClosed, InvalidRequest

logger = logging.getLogger("status_relay.registry")


class SubscriberRegistry:
    """
    In-memory map of jobId -> Subscription, one per app instance.
    Only touched from the event loop, so no locking.
    """

    def __init__(self):
        self._subs: Dict[str, Subscription] = {}

    def __len__(self) -> int:
        return len(self._subs)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._subs

    def get(self, job_id: str) -> Optional[Subscription]:
        return self._subs.get(job_id)

    def job_ids(self) -> List[str]:
        return list(self._subs.keys())

    def subscribe(self, job_id: str) -> Subscription:
        if not job_id:
            raise InvalidRequest("Missing jobId query parameter")

        sub = Subscription(job_id=job_id)
        sub.channel.send({"type": "connected", "jobId": job_id, "message": CONNECTED_MESSAGE})

        previous = self._subs.get(job_id)
        self._subs[job_id] = sub
        if previous is not None:
            previous.channel.close()
            logger.info("Replaced existing client for job=%s", job_id)

        logger.info("Client connected for job=%s active_jobs=%d", job_id, len(self._subs))
        return sub

    def release(self, sub: Subscription) -> bool:
        """Drop `sub` if it is still the registered one. Returns True if an entry was removed."""
        sub.channel.close()
        current = self._subs.get(sub.job_id)
        if current is not sub:
            return False
        del self._subs[sub.job_id]
        connected_s = (datetime.now(timezone.utc) - sub.created_at).total_seconds()
        logger.info(
            "Client disconnected for job=%s after %.1fs active_jobs=%d",
            sub.job_id, connected_s, len(self._subs),
        )
        return True

    def publish(self, job_id: object, event: dict) -> bool:
        # subscriptions are keyed by the query-string id, so only strings can match
        sub = self._subs.get(job_id) if isinstance(job_id, str) else None
        if sub is None:
            return False
        try:
            sub.channel.send(event)
        except ChannelClosed:
            logger.warning("Stale channel for job=%s, dropping subscription", job_id)
            self.release(sub)
            return False
        return True

    def close_all(self) -> None:
        for sub in list(self._subs.values()):
            sub.channel.close()
        self._subs.clear()
