"""Application configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

_ENV_PREFIX = "INVOICE_APP_"


class AppConfig(BaseModel):
    """
    Runtime configuration for the invoice core.

    Values come from INVOICE_APP_* environment variables (optionally loaded
    from a .env file) via from_env(); defaults suit a local Valkey.
    """

    valkey_url: str = Field(
        default="redis://localhost:6379/0",
        description="Connection URL of the Valkey/Redis store",
    )
    key_namespace: str = Field(
        default="invoice_app:",
        description="Prefix applied to every store key",
        max_length=64,
    )
    default_due_days: int = Field(
        default=30,
        description="Days until due for duplicated invoices",
        ge=1,
        le=365,
    )
    retain_failed_sync: bool = Field(
        default=True,
        description="Keep queue entries that failed replay for the next reconnect",
    )
    start_online: bool = Field(
        default=True,
        description="Initial connectivity status before the host reports one",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level",
        pattern="^(DEBUG|INFO|WARNING|ERROR)$",
    )

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "AppConfig":
        """
        Build config from the environment.

        Args:
            env_file: Optional .env path loaded before reading variables.
                Existing environment variables take precedence.

        Raises:
            pydantic.ValidationError: If a variable is out of bounds
        """
        if env_file is not None:
            load_dotenv(env_file, override=False)

        values: dict[str, str] = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{_ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw
        return cls.model_validate(values)
