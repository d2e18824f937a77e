"""Runtime configuration for the expense tracking backend."""
from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

_DEFAULT_DB_PATH = os.path.join(os.path.dirname(__file__), "expenses.db")


def _split_origins(raw: str) -> List[str]:
    origins = [item.strip() for item in raw.split(",") if item.strip()]
    return origins or ["*"]


class Settings(BaseModel):
    db_path: str = Field(default_factory=lambda: os.environ.get("VAULTTRACK_DB_PATH", _DEFAULT_DB_PATH))
    host: str = Field(default_factory=lambda: os.environ.get("VAULTTRACK_HOST", "127.0.0.1"))
    port: int = Field(default_factory=lambda: int(os.environ.get("VAULTTRACK_PORT", "5000")))
    cors_origins: List[str] = Field(
        default_factory=lambda: _split_origins(os.environ.get("VAULTTRACK_CORS_ORIGINS", "*"))
    )

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.db_path}"


settings = Settings()
