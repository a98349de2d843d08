import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ORIGINS = "http://localhost:5173,http://localhost:3000,http://localhost:8501"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Pod metadata injected by the downward API
    POD_NAME: str = "backend-pod"
    POD_NAMESPACE: str = "clickbus"
    POD_IP: str = "unknown"

    SERVICE_NAME: str = "ClickBus Backend"
    APP_VERSION: str = "1.0.0"

    LOG_BUFFER_SIZE: int = Field(100, ge=1)
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = Field(default_factory=lambda: DEFAULT_ORIGINS.split(","))
    RATE_LIMIT: Optional[str] = None

    # Optional event sink
    REDIS_URL: Optional[str] = None
    REDIS_QUEUE: str = "clickbus-queue"


def load_settings(environ=None) -> Settings:
    """Resolve settings once from the process environment."""
    env = os.environ if environ is None else environ
    data = {}
    for key in ("POD_NAME", "POD_NAMESPACE", "POD_IP", "APP_VERSION",
                "LOG_LEVEL", "RATE_LIMIT", "REDIS_URL", "REDIS_QUEUE"):
        if env.get(key):
            data[key] = env[key]
    if env.get("LOG_BUFFER_SIZE"):
        data["LOG_BUFFER_SIZE"] = env["LOG_BUFFER_SIZE"]
    if env.get("ALLOWED_ORIGINS"):
        data["ALLOWED_ORIGINS"] = [o.strip() for o in env["ALLOWED_ORIGINS"].split(",") if o.strip()]
    return Settings(**data)
