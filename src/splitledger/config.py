from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    bot_token: str = Field(..., alias="BOT_TOKEN")
    ledger_node_url: str = Field("https://fullnode.testnet.aptoslabs.com", alias="LEDGER_NODE_URL")
    ledger_module_address: str = Field(..., alias="LEDGER_MODULE_ADDRESS")
    ledger_module_name: str = Field("splitrix", alias="LEDGER_MODULE_NAME")
    ledger_timeout: float = Field(10.0, alias="LEDGER_TIMEOUT")
    tz: str = Field("Europe/Moscow", alias="TZ")
    reminder_interval_hours: int = Field(24, alias="REMINDER_INTERVAL_HOURS", ge=1)
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    @property
    def module_id(self) -> str:
        return f"{self.ledger_module_address}::{self.ledger_module_name}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]
