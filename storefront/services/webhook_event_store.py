# storefront/services/webhook_event_store.py
import redis

from storefront.utils.logging import get_logger
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, WEBHOOK_EVENT_TTL_SECONDS

logger = get_logger(__name__)

#LUA porownaj i usun, atomowo
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class WebhookEventStore:
    """
    -zapamietanie przetworzonego eventu webhooka (SET NX EX)
    -zwolnienie gdy przetwarzanie sie nie udalo, zeby ponowienie przeszlo
    Provider potrafi dostarczyc ten sam event kilka razy.
    """

    def __init__(self, url: str | None = None, ttl: int | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl or WEBHOOK_EVENT_TTL_SECONDS

    @staticmethod
    def _key(event_id: str) -> str:
        return f"webhook:event:{event_id}"

    @redis_retry()
    def claim(self, event_id: str) -> bool:
        key = self._key(event_id)
        logger.info(f"Claim {key}")
        # SET webhook:event:evt_1 "processing" NX EX 259200
        return bool(
            self.redis.set(
                name=key,
                value="processing",
                nx=True,
                ex=self.ttl,
            )
        )

    @redis_retry()
    def mark_done(self, event_id: str) -> None:
        self.redis.set(name=self._key(event_id), value="done", xx=True, ex=self.ttl)

    @redis_retry()
    def release(self, event_id: str) -> bool:
        key = self._key(event_id)
        logger.info(f"Release {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, "processing")
        return bool(res)
