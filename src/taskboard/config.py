from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str
    port: int
    debug: bool
    cors_origins: list[str] = []
    frontend_url: str  # URL of the frontend application, used in notification links
    admin_email: str = "admin@taskboard.local"  # Bootstrap admin account, created on first start
    admin_password: str = "admin"
    telegram_bot_token: str | None = None  # Mirrors notifications to users with a linked Telegram chat (optional)
    excerpt_length: int = 100  # Max comment characters quoted in a notification
    # Build metadata injected during Docker build via environment variables
    git_commit_hash: str = "unknown"
    git_commit_date: str = "unknown"
    build_time: str = "unknown"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "TASKBOARD_",
        "extra": "ignore",
    }
