"""Centralized configuration for corpus-search using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from corpus_search.search.storage import snapshot_filename


class Settings(BaseSettings):
    """Typed configuration loaded from ``CORPUS_SEARCH_*`` environment variables.

    Command-line flags take precedence over these values; see ``cli.main``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORPUS_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    stopword_file: Path | None = Field(default=None, description="Newline-delimited stopword list")
    corpus_dir: Path | None = Field(default=None, description="Directory holding .txt and .html documents")
    snapshot_dir: Path = Field(default=Path("."), description="Directory where index snapshots are stored")
    enable_stemming: bool = Field(default=False, description="Normalize terms with the reduced Porter stemmer")
    snippet_radius: int = Field(default=0, ge=0, description="Tokens of context on each side of a snippet match")

    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=False, description="Emit structured JSON log lines")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return normalized

    def snapshot_path(self) -> Path:
        """Snapshot file for the configured stemming mode."""
        return self.snapshot_dir / snapshot_filename(self.enable_stemming)

    def resolve_corpus_dir(self) -> Path | None:
        if self.corpus_dir is None:
            return None
        return self.corpus_dir.expanduser().resolve()
