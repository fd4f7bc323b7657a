from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Storage capability
    storage_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    storage_prefix: str = "prepline:"
    training_data_key: str = "ingredientParsingTraining"
    custom_ingredients_key: str = "customIngredients"

    # Correction learning
    correction_reuse_threshold: float = 0.8
    correction_similar_threshold: float = 0.7

    # API
    rate_limit: str = "100/minute"
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://0.0.0.0:3000",
        "http://localhost",
        "http://127.0.0.1",
    ]


settings = Settings()
