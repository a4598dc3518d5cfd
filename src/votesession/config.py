"""Configuration management for votesession."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONTRACT_ADDRESS = "0x59D88aD5bD90ebbBBcb135D65011e386f17f6359"


class Settings(BaseSettings):
    """Session layer settings."""

    model_config = SettingsConfigDict(
        env_prefix="VOTESESSION_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Provider Configuration
    rpc_url: str | None = Field(default=None, description="Fallback JSON-RPC endpoint (http or https)")
    request_timeout: float = Field(default=10.0, gt=0, description="HTTP provider timeout in seconds")

    # Contract Configuration
    contract_address: str = Field(default=DEFAULT_CONTRACT_ADDRESS, description="Deployed voting contract address")
    artifact_path: Path | None = Field(default=None, description="Build artifact holding the contract ABI")
    owner_method: str = Field(default="owner", description="Read-only method returning the contract owner")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_profile: Literal["cli", "default"] = Field(default="cli", description="Log output profile")


def get_settings(**overrides: object) -> Settings:
    """Build settings from the environment, `.env` and explicit overrides.

    Overrides whose value is ``None`` are ignored so CLI options left unset
    fall through to the environment.
    """

    values = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**values)
