"""Runtime settings for dialoggen."""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
import logging

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "mistral:7b"
DEFAULT_OLLAMA_HOST = "http://localhost:11434"

class Settings(BaseSettings):
    """Application settings loaded from environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Model Settings
    llm_model: str = Field(DEFAULT_MODEL, description="Model used when neither CLI nor scene.txt names one")
    ollama_host: str = Field(DEFAULT_OLLAMA_HOST, description="Base URL of the Ollama server")
    request_timeout: float = Field(300.0, gt=0, description="Total seconds allowed per model call")

    # Logging
    log_level: str = Field("INFO")
    log_file: Optional[Path] = Field(None)

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        # Strip trailing comments left in .env files
        value = value.split('#')[0].strip().upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"Unknown log level: {value}")
        return value

    def setup_logging(self, verbose: bool = False):
        """Configure logging based on settings."""
        level = logging.DEBUG if verbose else getattr(logging, self.log_level, logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        # Clear existing handlers
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(self.log_file)
            file_handler.setLevel(level)
            file_format = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            file_handler.setFormatter(file_format)
            root_logger.addHandler(file_handler)

        # Only log warnings and errors to console
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_format = logging.Formatter('%(levelname)s: %(message)s')
        console_handler.setFormatter(console_format)
        root_logger.addHandler(console_handler)

        if self.log_file:
            logger.info(f"Logging to file: {self.log_file}")

# Create global settings instance
settings = Settings()
