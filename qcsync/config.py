"""
Configuration management.
Simple .env based config, same variables as the deployment environment.
"""

import re
from typing import List, Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigError(Exception):
    """Required configuration is missing or invalid."""

    def __init__(self, missing: List[str], invalid: Optional[List[str]] = None):
        self.missing = missing
        self.invalid = invalid or []
        parts = []
        if self.missing:
            parts.append(f"Missing required configuration: {', '.join(self.missing)}")
        if self.invalid:
            parts.append(f"Invalid configuration: {'; '.join(self.invalid)}")
        super().__init__(". ".join(parts))


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Slack (only needed by the chat front end)
    slack_bot_token: Optional[str] = None
    slack_signing_secret: Optional[str] = None
    watch_channel_id: Optional[str] = None
    slack_command: str = "/qc-sheet"

    # Shopify
    shopify_domain: str
    shopify_admin_token: str
    shopify_api_version: str = "2025-01"
    shopify_min_gap_seconds: float = 0.4

    # Google Sheets (service account)
    google_service_account_email: str
    google_private_key: str
    sheet_doc_id: str
    sheet_tab_name: str = "Customer"

    # Order numbers look like C#1234
    order_prefix: str = "C"

    # Run log
    run_log_path: str = "./data/run-log.json"

    # Logging
    log_level: str = "INFO"

    @field_validator("google_private_key")
    @classmethod
    def unescape_private_key(cls, value: str) -> str:
        # Secrets stores often keep the PEM on one line with literal "\n"
        return value.replace("\\n", "\n")

    @field_validator("order_prefix")
    @classmethod
    def single_letter_prefix(cls, value: str) -> str:
        value = value.strip()
        if not re.fullmatch(r"[A-Za-z]", value):
            raise ValueError("must be a single letter")
        return value

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def order_example(self) -> str:
        """Example order number shown in user-facing messages."""
        return f"{self.order_prefix}#1234"

    def require_slack(self) -> None:
        """Raise ConfigError unless the Slack front end credentials are set."""
        missing = [
            name.upper()
            for name in ("slack_bot_token", "slack_signing_secret")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigError(missing)


def load_settings(**overrides) -> Settings:
    """
    Build Settings, turning pydantic validation errors into a ConfigError
    that lists the environment variables to fix.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing: List[str] = []
        invalid: List[str] = []
        for error in e.errors():
            name = str(error["loc"][0]).upper() if error["loc"] else "?"
            if error["type"] == "missing":
                missing.append(name)
            else:
                invalid.append(f"{name}: {error['msg']}")
        raise ConfigError(missing, invalid) from e
