# maintenance_app/core/config.py
from typing import List, Union
import json

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Las variables de entorno se leen en mayúsculas (MONGO_URL, DB_NAME, ...)
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === MongoDB ===
    mongo_url: str = "mongodb://localhost:27017"
    db_name: str = "maintenance"
    mongo_tls: bool = False

    # === Seguridad / JWT ===
    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    # === Seguridad login (anti brute-force) ===
    login_rate_limit: str = "5/minute"
    rate_limit_enabled: bool = True

    # === CORS ===
    # Acepta JSON (["http://a","https://b"]) o lista separada por comas ("http://a,https://b")
    cors_origins: Union[str, List[str]] = ""

    # === Paginación ===
    max_page_size: int = 50

    # === Flujo de trabajo ===
    workflow_catalog_version: str = "2"

    # === Notificaciones ===
    notifications_enabled: bool = True

    # === Logging ===
    log_level: str = Field(default="INFO")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        if v is None:
            return []
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []
            if s.startswith("["):
                try:
                    data = json.loads(s)
                    if isinstance(data, list):
                        return [str(x).strip() for x in data if str(x).strip()]
                except ValueError:
                    # si parece JSON pero está mal formado, caemos al split por comas
                    pass
            return [item.strip() for item in s.split(",") if item.strip()]
        return [str(v).strip()] if str(v).strip() else []


# Instancia global usada por main.py y los servicios
settings = Settings()
