"""Configuration management for the application."""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Data root — the SQLite DB and the input draft live here (outside the repo)
    data_root: str = Field(default="~/Documents/skill_log")

    # Database — auto-derived from data_root if not explicitly set
    database_url: str | None = Field(default=None)

    # Files under data_root
    draft_filename: str = Field(default="chat_draft.json")
    export_filename: str = Field(default="skillData.json")

    # Title given to records captured from the quick-input box
    memo_title: str = Field(default="ChatMemo")

    log_level: str = Field(default="INFO")

    # Origins allowed to call the API from a browser
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    @model_validator(mode="after")
    def derive_paths(self) -> "Settings":
        """Expand data_root and derive database_url if not explicitly set."""
        # Expand ~ and resolve to absolute path
        self.data_root = str(Path(self.data_root).expanduser().resolve())
        if self.database_url is None:
            self.database_url = f"sqlite:///{self.data_root}/skill_log.db"
        self.log_level = self.log_level.upper()
        return self

    @property
    def draft_path(self) -> Path:
        """Absolute path of the unsent-input draft file."""
        return Path(self.data_root) / self.draft_filename


# Global settings instance
settings = Settings()
