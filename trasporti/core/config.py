from typing import List, Optional
from pydantic import Field
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


ENV_CONFIG = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class CORSSettings(BaseSettings):
    """CORS configuration settings."""

    model_config = SettingsConfigDict(env_prefix="CORS_", **ENV_CONFIG)

    allowed_origins: List[str] = Field(default=["*"])
    allowed_methods: List[str] = Field(default=["*"])
    allowed_headers: List[str] = Field(default=["*"])
    allow_credentials: bool = Field(default=True)


class DatabaseSettings(BaseSettings):
    """Document store connection settings."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_", **ENV_CONFIG)

    url: Optional[str] = Field(default=None, description="Store connection string")
    echo: bool = Field(default=False)
    pool_size: int = Field(default=5)
    max_overflow: int = Field(default=10)
    pool_timeout: int = Field(default=30)
    pool_recycle: int = Field(default=1800)


class SecuritySettings(BaseSettings):
    """Security configuration settings."""

    model_config = SettingsConfigDict(env_prefix="JWT_", **ENV_CONFIG)

    secret: Optional[str] = Field(default=None)
    algorithm: str = Field(default="HS256")
    admin_token_expire_minutes: int = Field(default=4 * 60)
    user_token_expire_minutes: int = Field(default=7 * 24 * 60)


class AdminSettings(BaseSettings):
    """Fixed administrator credentials and master user seed."""

    model_config = ENV_CONFIG

    admin_user: Optional[str] = Field(default=None)
    admin_pass: Optional[str] = Field(default=None)
    master_username: Optional[str] = Field(default=None)
    master_password: Optional[str] = Field(default=None)


class ImportSettings(BaseSettings):
    """Excel import pipeline settings."""

    model_config = SettingsConfigDict(env_prefix="IMPORT_", **ENV_CONFIG)

    source_path: str = Field(default="usato.xlsx")
    schema_path: str = Field(default="schema/trasporto.json")
    sample_size: int = Field(default=200, ge=1)


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LOG_", **ENV_CONFIG)

    level: str = Field(default="INFO")
    json_format: bool = Field(default=False)
    format: str = Field(default="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    file: Optional[str] = Field(default=None)
    max_bytes: int = Field(default=10 * 1024 * 1024)
    backup_count: int = Field(default=5)


class Settings(BaseSettings):
    PROJECT_NAME: str = Field(default="Trasporti API")
    VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3001)

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    admin: AdminSettings = Field(default_factory=AdminSettings)
    importer: ImportSettings = Field(default_factory=ImportSettings)
    cors_settings: CORSSettings = Field(default_factory=CORSSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = ENV_CONFIG


@lru_cache
def get_settings() -> Settings:
    return Settings()
