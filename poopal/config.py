from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql://postgres:postgres@db:5432/poopal"
    anthropic_api_key: str = ""

    vision_model: str = "claude-sonnet-4-5-20250929"  # Stool image analysis
    chat_model: str = "claude-sonnet-4-5-20250929"  # Dr. Poo conversations

    # Anthropic API timeout settings (seconds)
    ai_timeout: int = 30  # Upper bound before a call is treated as failed
    ai_connect_timeout: int = 10  # Connection establishment

    analysis_max_tokens: int = 1000
    chat_max_tokens: int = 500
    chat_history_limit: int = 10  # Prior chat turns replayed to the model

    # Auth settings
    session_cookie_name: str = "poopal_session"
    session_max_age: int = 86400 * 7  # 7 days
    session_cookie_secure: bool = False  # True in production

    cors_origin: str = "http://localhost:5173"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
