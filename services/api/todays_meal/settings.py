from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./data/todays-meal.db"

    # AI
    ai_mode: str = "mock"  # "mock" or "gemini"
    gemini_api_key: Optional[str] = None
    conversation_model: str = "gemini-2.5-flash"
    recipe_model: str = "gemini-2.5-flash"
    conversation_temperature: float = 0.7
    recipe_temperature: float = 0.7
    llm_timeout_seconds: float = 60.0

    # Recipe generation loop
    max_recipe_attempts: int = 6
    target_recipe_count: int = 3
    quick_cooking_max_minutes: int = 20
    reference_recipe_limit: int = 3
    recipe_image_base_url: str = "/images/recipes"

    # History retention
    max_conversations_per_user: int = 10

    # Rate limiting (slowapi syntax)
    rate_limit: str = "60/minute"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]


settings = Settings()
