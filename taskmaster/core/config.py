# File: taskmaster/core/config.py

import os
from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, field_validator  # BaseSettings not needed


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [i.strip() for i in raw.split(",") if i.strip()]


class Settings(BaseModel):
    # Basic app info
    PROJECT_NAME: str = "Task Master API"
    VERSION: str = "0.1.0"

    api_v1_prefix: str = "/api/v1"
    environment: str = os.getenv("TASKMASTER_ENV", "development")
    debug: bool = _env_bool("TASKMASTER_DEBUG", False)
    log_level: str = os.getenv("TASKMASTER_LOG_LEVEL", "INFO")

    # CORS
    backend_cors_origins: List[str] = _env_list(
        "BACKEND_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    )

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./taskmaster.db")

    # Security / auth
    secret_key: str = os.getenv("SECRET_KEY", "CHANGE_ME_IN_PRODUCTION")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    algorithm: str = "HS256"
    cookie_name: str = "access_token"

    # Bootstrap admin, created on startup when both are set
    admin_email: Optional[str] = os.getenv("ADMIN_EMAIL") or None
    admin_password: Optional[str] = os.getenv("ADMIN_PASSWORD") or None
    admin_username: str = os.getenv("ADMIN_USERNAME", "admin")

    # Assignees may delete their own tasks through /tasks/delete/{id}
    allow_assignee_delete: bool = _env_bool("ALLOW_ASSIGNEE_DELETE", True)

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        if isinstance(v, list):
            return v
        return []

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
