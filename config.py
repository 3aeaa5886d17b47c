"""Application configuration with Pydantic validation.

All settings are loaded from .env file or environment variables.
Validation happens at import time - app fails fast with clear errors.

Usage:
    import config
    print(config.LLM_PROVIDER)  # "ollama"
    print(config.OLLAMA_MODEL)  # "llama3.2:3b-instruct-fp16"
"""

from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Validated application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # LLM Provider selection
    llm_provider: str = Field(default="ollama")

    # Ollama (default, local)
    ollama_url: str = Field(default="http://localhost:11434")
    ollama_model: str = Field(default="llama3.2:3b-instruct-fp16")

    # Google Gemini (optional alternative)
    google_api_key: str | None = Field(default=None, description="Google API key for Gemini")
    gemini_model: str = Field(default="gemini-flash-lite-latest")

    # Sampling
    request_timeout: float = Field(default=120.0)
    rule_temperature: float = Field(default=0.1)
    summary_temperature: float = Field(default=0.3)
    top_p: float = Field(default=0.9)

    # Data
    transactions_csv: str = Field(default="data/data.csv")
    sample_size: int = Field(default=10)

    log_level: str = Field(default="INFO")

    @field_validator("llm_provider")
    @classmethod
    def validate_llm_provider(cls, v: str) -> str:
        v = v.lower()
        if v not in ("ollama", "gemini"):
            raise ValueError("LLM_PROVIDER must be 'ollama' or 'gemini'")
        return v

    @model_validator(mode="after")
    def validate_gemini_key(self):
        if self.llm_provider == "gemini" and (
            not self.google_api_key or len(self.google_api_key) < 10
        ):
            raise ValueError(
                "GOOGLE_API_KEY is required when LLM_PROVIDER=gemini. "
                "Get your key at https://aistudio.google.com/apikey"
            )
        return self


# Validate at import time - fail fast with clear errors
settings = Settings()

# =============================================================================
# Module-level exports
# =============================================================================

# Paths
ROOT_DIR = Path(__file__).parent
DATA_DIR = ROOT_DIR / "data"
TRANSACTIONS_CSV = ROOT_DIR / settings.transactions_csv

# LLM Provider
LLM_PROVIDER = settings.llm_provider

# Ollama
OLLAMA_URL = settings.ollama_url.rstrip("/")
OLLAMA_MODEL = settings.ollama_model

# Google Gemini
GOOGLE_API_KEY = settings.google_api_key
GEMINI_MODEL = settings.gemini_model

# Sampling
REQUEST_TIMEOUT = settings.request_timeout
RULE_TEMPERATURE = settings.rule_temperature
SUMMARY_TEMPERATURE = settings.summary_temperature
TOP_P = settings.top_p

# Summary prompt
SAMPLE_SIZE = settings.sample_size

LOG_LEVEL = settings.log_level.upper()
