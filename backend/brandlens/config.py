"""
Configuration management for brandlens
Environment-based settings with secure defaults
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "brandlens"
    APP_ENV: str = "development"  # development, staging, production
    DEBUG: bool = False
    API_VERSION: str = "v1"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    WORKERS: int = 4

    # Database (external response / catalog store)
    DATABASE_URL: str = "sqlite+aiosqlite:///./brandlens.db"
    DATABASE_POOL_SIZE: int = 20
    DATABASE_MAX_OVERFLOW: int = 10

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"

    # Citation mention worker
    CITATION_WORKER_SECRET: Optional[str] = None  # Shared bearer secret for the trigger endpoint
    CITATION_CACHE_BACKEND: str = "memory"  # memory, redis
    CITATION_CACHE_TTL: int = 86400  # 24 hours in seconds
    CITATION_CONCURRENCY: int = 3
    CITATION_BATCH_DELAY: float = 0.5  # seconds between batches
    CITATION_ROBOTS_TIMEOUT: float = 3.0  # seconds
    CITATION_FETCH_TIMEOUT: float = 5.0  # seconds
    CITATION_MAX_BYTES: int = 512 * 1024
    CITATION_MAX_CHARS: int = 50000
    CITATION_USER_AGENT: str = "Brandlens-Citation-Bot/1.0"

    # Provider retry policy (applied by the orchestration layer)
    PROVIDER_MAX_RETRIES: int = 3
    PROVIDER_RETRY_DELAY: float = 2.0  # seconds, doubled per attempt

    # Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/1"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/2"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    @field_validator("CITATION_CACHE_BACKEND")
    @classmethod
    def validate_cache_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("memory", "redis"):
            raise ValueError("CITATION_CACHE_BACKEND must be 'memory' or 'redis'")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Cached settings loader"""
    return Settings()


# Multi-factor scoring weights
DEFAULT_SCORING_WEIGHTS = {
    "presence": 0.3,      # Base score for being mentioned
    "position": 0.2,      # Early mention bonus
    "sentiment": 0.25,    # Positive/negative sentiment impact
    "context": 0.1,       # Recommendation vs example context
    "competition": 0.1,   # Penalty for strong competitors
    "prominence": 0.05,   # Frequency and emphasis
}

# Simple score bonus by prominence index (first, second, third, later)
SIMPLE_PROMINENCE_BONUS = [30, 20, 10, 0]
SIMPLE_COMPETITOR_PENALTY = 5
SIMPLE_COMPETITOR_PENALTY_CAP = 20

# Citation extraction limits
CITATION_LIMIT_SIMPLE = 10
CITATION_LIMIT_GROUNDED = 20

# Industry-specific known brands (used to boost relevance)
INDUSTRY_BRANDS = {
    "software": {
        "microsoft", "google", "apple", "adobe", "salesforce", "oracle", "ibm", "github",
        "atlassian", "slack", "zoom", "dropbox", "notion", "asana", "trello",
    },
    "ecommerce": {
        "shopify", "woocommerce", "magento", "bigcommerce", "stripe", "paypal", "square",
        "amazon", "ebay", "etsy",
    },
    "marketing": {
        "hubspot", "mailchimp", "salesforce", "marketo", "pardot", "klaviyo", "constant contact",
        "hootsuite", "buffer", "sprout social",
    },
    "design": {
        "adobe", "figma", "sketch", "canva", "invision", "marvel", "principle", "framer",
    },
    "finance": {
        "quickbooks", "xero", "sage", "freshbooks", "wave", "mint", "ynab",
    },
}
