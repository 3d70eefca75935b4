"""Application configuration via Pydantic Settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Rolls
    default_game: str = "myz"
    default_max_push: int = 1
    rng_seed: int | None = None  # fixed seed for reproducible rolls

    # Roll store
    roll_cache_ttl: int = 3600  # seconds

    # Logging
    log_level: str = "INFO"

    # App
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "YZROLL_"}


settings = Settings()
