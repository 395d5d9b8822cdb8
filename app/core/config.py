from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ADMIN_API_KEY = "oa-admin-dev-key"
DEFAULT_USER_API_KEY = "oa-user-dev-key"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="OA_", extra="ignore")

    app_name: str = "Order Admin"
    env: str = "dev"
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    database_url: str = "sqlite+pysqlite:///./orders.db"

    bootstrap_demo_on_startup: bool = False

    auth_enabled: bool = True
    admin_api_key: str = DEFAULT_ADMIN_API_KEY
    user_api_key: str = DEFAULT_USER_API_KEY
    admin_user_id: str = "user-admin-001"
    user_user_id: str = "user-customer-001"

    default_page_limit: int = Field(default=9, ge=1)
    max_page_limit: int = Field(default=100, ge=1)

    def model_post_init(self, __context) -> None:
        if self.env.lower() == "dev":
            return

        insecure_items: list[str] = []
        if self.admin_api_key == DEFAULT_ADMIN_API_KEY:
            insecure_items.append("OA_ADMIN_API_KEY")
        if self.user_api_key == DEFAULT_USER_API_KEY:
            insecure_items.append("OA_USER_API_KEY")

        if insecure_items:
            raise ValueError(
                "insecure default api keys are not allowed outside dev mode; set env vars: "
                + ", ".join(sorted(insecure_items))
            )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
