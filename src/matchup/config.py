"""Lightweight configuration for the matchup generator."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from matchup.domain.rules_config import AllocationRules, RulesConfig

PACKAGE_DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    """Minimal application settings."""

    model_config = SettingsConfigDict(
        env_prefix="MATCHUP_", env_file=".env", env_file_encoding="utf-8"
    )

    data_dir: Path = Field(
        default=PACKAGE_DATA_DIR, description="Directory holding the static JSON tables"
    )
    max_balance_attempts: int = Field(
        default=100, description="Constructions tried by the balanced search", gt=0
    )
    strength_cap: float = Field(
        default=2000.0, description="Total strength mapped to a faction score of 10", gt=0.0
    )
    fixed_faction: str = Field(
        default="Odrysian Kingdom", description="Faction handed to everyone in civil-war mode"
    )
    log_level: str = Field(default="INFO", description="Root log level for the CLI")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )

    def rules(self) -> RulesConfig:
        """Rule configuration with the tunable allocation values applied."""

        return RulesConfig(
            allocation=AllocationRules(
                strength_cap=self.strength_cap,
                max_attempts=self.max_balance_attempts,
                fixed_faction=self.fixed_faction,
            )
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
