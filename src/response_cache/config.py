import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache
    cache_max_entries: int = int(os.getenv("CACHE_MAX_ENTRIES", "100"))
    cache_ttl: float = float(os.getenv("CACHE_TTL", "86400"))  # 24 hours default
    cache_similarity_threshold: float = float(os.getenv("CACHE_SIMILARITY_THRESHOLD", "0.85"))
    cache_enable_similarity: bool = os.getenv("CACHE_ENABLE_SIMILARITY", "true").lower() == "true"
    cache_enable_compression: bool = os.getenv("CACHE_ENABLE_COMPRESSION", "true").lower() == "true"
    cache_compression_min_length: int = int(os.getenv("CACHE_COMPRESSION_MIN_LENGTH", "1024"))
    cache_key_prefix_length: int = int(os.getenv("CACHE_KEY_PREFIX_LENGTH", "500"))
    # 0 disables the periodic sweep in the API process
    cache_cleanup_interval: float = float(os.getenv("CACHE_CLEANUP_INTERVAL", "300"))

    # Persistence (warmup source)
    cache_persist: bool = os.getenv("CACHE_PERSIST", "false").lower() == "true"
    cache_history_key: str = os.getenv("CACHE_HISTORY_KEY", "response_cache:history")
    cache_warmup_limit: int = int(os.getenv("CACHE_WARMUP_LIMIT", "1000"))

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 0 <= self.cache_similarity_threshold <= 1:
            raise ValueError("CACHE_SIMILARITY_THRESHOLD must be between 0 and 1 for Jaccard similarity")

        if self.cache_key_prefix_length <= 0:
            raise ValueError(
                f"CACHE_KEY_PREFIX_LENGTH must be positive, got {self.cache_key_prefix_length}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )
