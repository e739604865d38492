from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./templates.db"
    database_echo: bool = False
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None

    # Коллекция шаблонов писем и режим нескольких арендаторов
    templates_collection_path: str = "emailTemplates"
    multi_tenant_mode: bool = False

    # Локальное хранилище в памяти вместо БД
    use_emulator: bool = False

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}

settings = Settings()
