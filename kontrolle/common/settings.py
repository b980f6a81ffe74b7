from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class KontrolleSettings(BaseSettings):
    # Composite key delimiter used when the config does not set one
    delimiter: str = ":"

    # Logging
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    # Default authorization config file
    config_path: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="KONTROLLE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> KontrolleSettings:
    return KontrolleSettings()
