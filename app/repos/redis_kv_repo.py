# app/repos/redis_kv_repo.py
import json
from typing import Any, Dict

import redis

from app.utils.retry import redis_retry
from app.utils.settings import REDIS_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)


class RedisKeyValueRepo:
    """
    -odczyt kolekcji z retry (tenacity)
    -zapis bez retry, best effort
    -save_many w MULTI/EXEC, redis wykonuje to atomowo
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def load(self, key: str) -> Any | None:
        raw = self.redis.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        self.redis.set(key, json.dumps(value))

    def save_many(self, values: Dict[str, Any]) -> None:
        pipe = self.redis.pipeline(transaction=True)
        for key, value in values.items():
            pipe.set(key, json.dumps(value))
        pipe.execute()
        logger.info(f"Zapisano atomowo klucze {list(values)}")

    @redis_retry()
    def ping(self) -> bool:
        return bool(self.redis.ping())
