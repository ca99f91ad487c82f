"""Redis implementation of WarmupSource.

Keeps a capped history of generated responses as JSON strings in a Redis
list (newest at the head). The cache core never touches it: the API
process writes through to it after storing a fresh response, and replays
it into the cache at startup.
"""

import json
import logging
import time
from typing import Any

import redis

from response_cache.config import get_redis_client, settings
from response_cache.entities import WarmupRecord

logger = logging.getLogger(__name__)


class RedisHistoryRepository:
    """Redis list of past (prompt, model, response) records.

    This class satisfies the WarmupSource protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        history_key: str | None = None,
        max_records: int | None = None,
    ) -> None:
        """Initialize the Redis history repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
            history_key: Name of the Redis list. Defaults to settings.
            max_records: Number of records kept. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._key = history_key or settings.cache_history_key
        self._max_records = max_records if max_records is not None else settings.cache_warmup_limit

    @classmethod
    def create(
        cls,
        history_key: str | None = None,
        max_records: int | None = None,
    ) -> "RedisHistoryRepository":
        """Factory method to create RedisHistoryRepository with defaults.

        Args:
            history_key: Redis list name. If None, uses settings.
            max_records: History cap. If None, uses settings.

        Returns:
            Configured RedisHistoryRepository
        """
        return cls(history_key=history_key, max_records=max_records)

    @staticmethod
    def _encode(record: WarmupRecord) -> str:
        return json.dumps(
            {
                "prompt": record.prompt,
                "model": record.model,
                "response": record.response,
                "options": record.options,
                "token_count": record.token_count,
                "tags": record.tags,
                "stored_at": record.stored_at or time.time(),
                "expires_at": record.expires_at,
            },
            ensure_ascii=False,
            default=str,
        )

    @staticmethod
    def _decode(raw: str | bytes) -> WarmupRecord | None:
        try:
            data: dict[str, Any] = json.loads(raw)
            return WarmupRecord(
                prompt=data["prompt"],
                model=data["model"],
                response=data["response"],
                options=data.get("options"),
                token_count=data.get("token_count"),
                tags=data.get("tags") or {},
                stored_at=float(data.get("stored_at") or 0.0),
                expires_at=data.get("expires_at"),
            )
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed history record", extra={"error": str(e)})
            return None

    def append(self, record: WarmupRecord) -> None:
        """Push a record to the head of the history and trim the tail.

        Args:
            record: The record to store
        """
        pipe = self._client.pipeline()
        pipe.lpush(self._key, self._encode(record))
        pipe.ltrim(self._key, 0, self._max_records - 1)
        pipe.execute()

    def load(self, limit: int | None = None) -> list[WarmupRecord]:
        """Load stored records, newest first.

        Args:
            limit: Maximum number of records (None for the whole history)

        Returns:
            List of WarmupRecord; malformed records are skipped
        """
        if limit is not None and limit <= 0:
            return []
        end = -1 if limit is None else limit - 1
        raw_records = self._client.lrange(self._key, 0, end)
        records = []
        for raw in raw_records:  # type: ignore[union-attr]
            record = self._decode(raw)
            if record is not None:
                records.append(record)
        return records

    def count(self) -> int:
        """Count stored records.

        Returns:
            Length of the history list
        """
        return int(self._client.llen(self._key))  # type: ignore[arg-type]

    def clear(self) -> int:
        """Delete the whole history.

        Returns:
            Number of records deleted
        """
        count = self.count()
        self._client.delete(self._key)
        return count

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            result = self._client.ping()
            return bool(result)
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
