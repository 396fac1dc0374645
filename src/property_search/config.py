import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Search result cache
    search_cache_ttl_ms: int = int(os.getenv("SEARCH_CACHE_TTL_MS", "300000"))  # 5 minutes
    search_cache_max_size: int = int(os.getenv("SEARCH_CACHE_MAX_SIZE", "500"))

    # Suggestion cache
    suggestion_cache_ttl_ms: int = int(os.getenv("SUGGESTION_CACHE_TTL_MS", "1800000"))  # 30 minutes
    suggestion_cache_max_size: int = int(os.getenv("SUGGESTION_CACHE_MAX_SIZE", "100"))

    # Housekeeping
    cache_cleanup_interval_ms: int = int(os.getenv("CACHE_CLEANUP_INTERVAL_MS", "60000"))
    performance_max_samples: int = int(os.getenv("PERFORMANCE_MAX_SAMPLES", "1000"))

    # Fuzzy matching
    search_fuzzy_threshold: float = float(os.getenv("SEARCH_FUZZY_THRESHOLD", "0.4"))
    suggestion_fuzzy_threshold: float = float(os.getenv("SUGGESTION_FUZZY_THRESHOLD", "0.6"))

    # Property data fixture (JSON) for the in-memory source
    property_data_path: str | None = os.getenv("PROPERTY_DATA_PATH")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def search_cache_max_age_seconds(self) -> int:
        """Max-age advertised in Cache-Control for search responses."""
        return self.search_cache_ttl_ms // 1000

    @property
    def suggestion_cache_max_age_seconds(self) -> int:
        """Max-age advertised in Cache-Control for suggestion responses."""
        return self.suggestion_cache_ttl_ms // 1000

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        for name in ("search_cache_ttl_ms", "suggestion_cache_ttl_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name.upper()} must not be negative")

        for name in (
            "search_cache_max_size",
            "suggestion_cache_max_size",
            "performance_max_samples",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name.upper()} must be at least 1, got {getattr(self, name)}")

        if self.cache_cleanup_interval_ms <= 0:
            raise ValueError("CACHE_CLEANUP_INTERVAL_MS must be positive")

        for name in ("search_fuzzy_threshold", "suggestion_fuzzy_threshold"):
            if not 0 <= getattr(self, name) <= 1:
                raise ValueError(f"{name.upper()} must be between 0 and 1")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
