"""
Web Push subscription registry and delivery.

Subscriptions are kept in memory, keyed by endpoint, so they do not survive
a restart.  Delivery goes through ``pywebpush`` signed with the configured
VAPID key pair; a subscription whose delivery fails is dropped for good.
"""
import asyncio
import json
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from pywebpush import WebPushException, webpush

from ..core.config import settings
from ..core.exceptions import InvalidSubscriptionError

logger = logging.getLogger(__name__)

Sender = Callable[[Dict[str, Any], str], Any]


@dataclass(frozen=True)
class BroadcastResult:
    delivered: int = 0
    removed: int = 0


class PushService:
    def __init__(
        self,
        public_key: Optional[str],
        private_key: Optional[str],
        subject: str,
        sender: Optional[Sender] = None,
    ):
        self.public_key = public_key or None
        self.private_key = private_key or None
        self.subject = subject
        self._sender = sender or self._webpush_send
        self._lock = threading.Lock()
        self._subscriptions: Dict[str, Dict[str, Any]] = {}

        if not self.enabled:
            logger.warning("VAPID keys missing; push notifications disabled.")

    @property
    def enabled(self) -> bool:
        return bool(self.public_key and self.private_key)

    def subscribe(self, descriptor: Mapping[str, Any]) -> Dict[str, Any]:
        endpoint = descriptor.get("endpoint") if isinstance(descriptor, Mapping) else None
        if not isinstance(endpoint, str) or not endpoint.strip():
            raise InvalidSubscriptionError("Subscription has no endpoint")
        subscription = dict(descriptor)
        with self._lock:
            self._subscriptions[endpoint] = subscription
        logger.info(f"Registered push subscription ({len(self)} active)")
        return subscription

    def unsubscribe(self, endpoint: str) -> bool:
        with self._lock:
            return self._subscriptions.pop(endpoint, None) is not None

    def _discard(self, subscription: Dict[str, Any]) -> bool:
        # only drop the descriptor that failed; a newer one for the endpoint stays
        endpoint = subscription.get("endpoint")
        with self._lock:
            if self._subscriptions.get(endpoint) is subscription:
                del self._subscriptions[endpoint]
                return True
        return False

    def subscriptions(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._subscriptions.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def __contains__(self, endpoint: object) -> bool:
        with self._lock:
            return endpoint in self._subscriptions

    def _webpush_send(self, subscription: Dict[str, Any], data: str) -> Any:
        # pywebpush adds ``aud``/``exp`` to the claims dict, so pass a fresh one
        return webpush(
            subscription_info=subscription,
            data=data,
            vapid_private_key=self.private_key,
            vapid_claims={"sub": self.subject},
        )

    async def broadcast(self, payload: Mapping[str, Any]) -> BroadcastResult:
        """
        Deliver ``payload`` to every current subscription.

        A failed delivery removes that subscription and moves on to the next
        one; nothing is raised to the caller.
        """
        if not self.enabled:
            return BroadcastResult()

        data = json.dumps(dict(payload))
        delivered = removed = 0
        for subscription in self.subscriptions():
            try:
                await asyncio.to_thread(self._sender, subscription, data)
                delivered += 1
            except WebPushException as e:
                status = getattr(e.response, "status_code", None) if e.response is not None else None
                logger.warning(f"Push failed, removing subscription: {status or e.message}")
                removed += int(self._discard(subscription))
            except Exception as e:
                logger.warning(f"Push failed, removing subscription: {e!r}")
                removed += int(self._discard(subscription))
        return BroadcastResult(delivered=delivered, removed=removed)


push_service = PushService(
    public_key=settings.VAPID_PUBLIC_KEY,
    private_key=settings.VAPID_PRIVATE_KEY,
    subject=settings.VAPID_SUBJECT,
)
