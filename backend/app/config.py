"""
Service settings, read from the environment and .env.

Four groups: where jobs are stored, how Claude is called, how links are
validated, and how PDFs are laid out. Every PDF_* value maps onto a
LayoutOptions field when a summary is downloaded.

Usage:
    from app.config import settings
    settings.PDF_PAGE_SIZE  # "A4" or "letter"

An empty variable in the shell (ANTHROPIC_API_KEY="" is a common one)
does not override a value set in .env.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @model_validator(mode="before")
    @classmethod
    def prefer_dotenv_over_empty_env(cls, data):
        """If an env var is empty but .env has a value, use the .env value."""
        from dotenv import dotenv_values

        dotenv_vals = dotenv_values(".env")
        for key, dotenv_value in dotenv_vals.items():
            if dotenv_value and (key not in data or not data.get(key)):
                data[key] = dotenv_value
        return data

    # --- Database ---
    # SQLite works out of the box; point this at postgresql+asyncpg:// in production
    DATABASE_URL: str = "sqlite+aiosqlite:///./video_summaries.db"

    # --- AI Summaries ---
    ANTHROPIC_API_KEY: str = ""
    SUMMARY_MODEL: str = "claude-sonnet-4-20250514"
    SUMMARY_MAX_TOKENS: int = 4096

    # --- Link Validation ---
    NOEMBED_URL: str = "https://noembed.com/embed"
    VALIDATION_TIMEOUT_SECONDS: float = 10.0

    # --- PDF Layout ---
    PDF_PAGE_SIZE: str = "A4"          # "A4" or "letter"
    PDF_MARGIN_PT: float = 72
    PDF_FONT_FAMILY: str = "serif"     # "serif" or "sans"
    # Optional custom TTFs (path or URL). All three must load, or we fall back.
    PDF_FONT_REGULAR: str = ""
    PDF_FONT_BOLD: str = ""
    PDF_FONT_ITALIC: str = ""

    # --- Application ---
    APP_ENV: str = "development"
    DEBUG: bool = False
    CORS_ORIGINS: str = "http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def has_custom_fonts(self) -> bool:
        return all([self.PDF_FONT_REGULAR, self.PDF_FONT_BOLD, self.PDF_FONT_ITALIC])


# Singleton instance — import this everywhere
settings = Settings()
