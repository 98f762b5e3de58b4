"""TopGames — Central Configuration via Pydantic Settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Store Feeds ──
    android_feed_url: str = (
        "https://interview-marketing-eng-dev.s3.eu-west-1.amazonaws.com/android.top100.json"
    )
    ios_feed_url: str = (
        "https://interview-marketing-eng-dev.s3.eu-west-1.amazonaws.com/ios.top100.json"
    )
    source_limit: int = 100  # Records kept per platform
    fetch_timeout: float = 30.0

    # ── Database ──
    database_url: str = ""

    # ── App ──
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    scheduler_enabled: bool = False
    populate_hour: int = 2  # Daily refresh at 2 AM

    @property
    def effective_database_url(self) -> str:
        """Return the configured URL if set, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        return "sqlite:///./topgames.db"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
