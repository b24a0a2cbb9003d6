# driver_rewards/core/config.py

from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./driver_rewards.db"

    # Redis (catalog search cache)
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379

    # JWT tokens
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 1 day

    # Account lockout
    MAX_LOGIN_ATTEMPTS: int = 5
    LOCKOUT_DURATION_MINUTES: int = 30

    # eBay Browse API
    EBAY_CLIENT_ID: str = ""
    EBAY_CLIENT_SECRET: str = ""
    EBAY_API_BASE_URL: str = "https://api.ebay.com"
    EBAY_OAUTH_URL: str = "https://api.ebay.com/identity/v1/oauth2/token"
    EBAY_SCOPE: str = "https://api.ebay.com/oauth/api_scope"
    EBAY_MARKETPLACE_ID: str = "EBAY_US"
    EBAY_SEARCH_LIMIT: int = 20
    # Seconds shaved off the token lifetime so a token is never used right at its expiry
    EBAY_TOKEN_SAFETY_MARGIN_SECONDS: int = 300

    # Catalog
    CATALOG_DEFAULT_QUERIES_STR: str = Field(
        default="gift card,headphones,coffee maker,backpack",
        alias="CATALOG_DEFAULT_QUERIES",
    )
    CATALOG_CACHE_TTL_SECONDS: int = 300
    PLACEHOLDER_IMAGE_URL: str = "https://via.placeholder.com/300?text=No+Image"

    # HTTP
    HTTP_TIMEOUT_SECONDS: float = 10.0
    IMAGE_PROXY_TIMEOUT_SECONDS: float = 5.0

    CORS_ORIGINS_STR: str = Field(default="http://localhost:5173", alias="CORS_ORIGINS")

    @property
    def CATALOG_DEFAULT_QUERIES(self) -> List[str]:
        return [q.strip() for q in self.CATALOG_DEFAULT_QUERIES_STR.split(",") if q.strip()]

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS_STR.split(",") if origin.strip()]

    @property
    def REDIS_URL(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}"

    model_config = SettingsConfigDict(env_file=".env", populate_by_name=True, extra="ignore")


settings = Settings()
