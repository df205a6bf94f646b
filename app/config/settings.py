from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""  # anon key; RLS applies
    supabase_service_role_key: Optional[str] = None  # Only needed by the seed script

    # Claude (trick generation)
    claude_api_key: Optional[str] = None
    claude_api_url: str = "https://api.anthropic.com/v1/messages"
    claude_api_version: str = "2023-06-01"
    claude_model: str = "claude-3-haiku-20240307"
    claude_max_tokens: int = 1000
    claude_timeout_seconds: float = 60.0

    # Session cache (mirror of the signed-in user, profile and session)
    session_cache_ttl_hours: int = 24
    session_cache_max_entries: int = 1000

    # Profile creation
    profile_create_max_retries: int = 2
    profile_create_retry_delay_seconds: float = 2.0

    # App
    app_name: str = "contentgen-pro"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    generate_rate_limit: str = "10/minute"  # Claude calls cost money

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_claude_configured(self) -> bool:
        return bool(self.claude_api_key)

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
