from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Supabase
    supabase_url: str
    supabase_service_role_key: str
    supabase_anon_key: str
    supabase_jwt_secret: str

    # OpenAI
    openai_api_key: str
    extraction_model: str = "gpt-4o"
    chat_model: str = "gpt-4o"
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    transcription_model: str = "whisper-1"

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    # Network search
    search_match_threshold: float = 0.5
    search_match_count: int = 5

    # Dashboard
    engaged_window_days: int = 30
    reconnect_after_days: int = 90
    reconnect_limit: int = 10

    # Rate limits (slowapi syntax)
    rate_limit_ingest: str = "30/minute"
    rate_limit_search: str = "20/minute"

    # Demo data seeding (POST /seed)
    # WARNING: For development/testing only!
    seed_enabled: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
