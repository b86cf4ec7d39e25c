from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class DatabaseSettings(BaseSettings):
    database_url: str = Field("sqlite:///./storefront_admin.db")
    pool_size: int = Field(20)
    max_overflow: int = Field(30)
    pool_timeout: int = Field(60)  # seconds
    pool_recycle: int = Field(3600)  # recycle connections every hour
    pool_pre_ping: bool = Field(True)
    create_tables: bool = Field(True)

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


class CacheSettings(BaseSettings):
    enabled: bool = True
    redis_url: str = "redis://localhost:6379/0"
    ttl_seconds: int = 3600  # category trees change rarely
    redis_socket_timeout: int = 5
    redis_socket_connect_timeout: int = 5
    redis_retry_on_timeout: bool = True


class CategorySettings(BaseSettings):
    min_name_length: int = Field(3)
    max_name_length: int = Field(100)
    max_slug_length: int = Field(100)
    max_description_length: int = Field(500)
    max_meta_title_length: int = Field(60)
    max_meta_description_length: int = Field(160)
    meta_description_excerpt: int = Field(157)

    default_page_size: int = Field(10)
    max_page_size: int = Field(100)

    # Re-resolve descendants' ancestor paths when a node is renamed or moved.
    cascade_ancestors: bool = Field(True)
    # Walk the candidate parent's chain instead of only rejecting self-parenting.
    deep_cycle_check: bool = Field(True)
    slug_retry_attempts: int = Field(3)


class AppSettings(BaseSettings):
    debug: bool = Field(False)
    allowed_hosts: str = Field("http://localhost:3000,http://localhost:8000")
    rate_limit: str = Field("120/minute")
    rate_limit_enabled: bool = Field(True)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    category: CategorySettings = Field(default_factory=CategorySettings)

    @classmethod
    def _split_allowed_hosts(cls, v: str) -> List[str]:
        if not v or not v.strip():
            return []
        hosts = []
        for host in v.split(","):
            host = host.strip()
            if host and (host.startswith("http://") or host.startswith("https://")):
                hosts.append(host.rstrip("/"))
            elif host:
                print(f"Skipping invalid host format: {host}")
        return hosts

    @property
    def allowed_hosts_list(self) -> List[str]:
        """Convert allowed_hosts string to list."""
        if not self.allowed_hosts:
            return ["http://localhost:3000", "http://localhost:8000"]
        return self._split_allowed_hosts(self.allowed_hosts)

    class Config:
        env_prefix = "APP_"
        case_sensitive = False
        env_nested_delimiter = "__"
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        extra = "ignore"


settings: AppSettings = AppSettings()

if __name__ == "__main__":
    settings = AppSettings()
    print(settings.model_dump())
