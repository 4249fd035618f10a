"""Application settings loaded from environment."""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed settings for the surveillance service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gemini
    google_api_key: Optional[str] = Field(default=None, alias="GOOGLE_API_KEY")
    gemini_api_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_API_BASE_URL",
    )
    gemini_model_id: str = Field(default="gemini-2.5-flash", alias="GEMINI_MODEL_ID")
    gemini_temperature: float = Field(default=0.2, alias="GEMINI_TEMPERATURE")
    gemini_max_output_tokens: int = Field(default=1024, alias="GEMINI_MAX_OUTPUT_TOKENS")

    # Oracles
    oracle_backend: Literal["gemini", "stub"] = Field(default="gemini", alias="ORACLE_BACKEND")
    oracle_timeout_seconds: float = Field(default=20.0, alias="ORACLE_TIMEOUT_SECONDS")
    oracle_max_retries: int = Field(default=2, alias="ORACLE_MAX_RETRIES")
    oracle_retry_sleep_seconds: float = Field(default=1.0, alias="ORACLE_RETRY_SLEEP_SECONDS")
    risk_prompt_version: str = Field(default="risk_v001", alias="RISK_PROMPT_VERSION")
    cluster_prompt_version: str = Field(default="cluster_v001", alias="CLUSTER_PROMPT_VERSION")

    # Storage
    village_store_path: str = Field(default="data/villages.json", alias="VILLAGE_STORE_PATH")

    # Runtime
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    run_env: str = Field(default="local", alias="RUN_ENV")

    def require_google_api_key(self) -> str:
        """Return the Gemini API key or raise."""
        if self.google_api_key:
            return self.google_api_key
        raise ValueError("GOOGLE_API_KEY must be set when ORACLE_BACKEND=gemini")
