"""Runtime settings read from the environment.

An optional ``.env`` file in the working directory is loaded first, so
values can live there instead of the shell. Variables already set in the
environment win over the file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DB_PATH = Path(__file__).resolve().parents[3] / "data" / "shopstock.db"

_TRUTHY = ("true", "1", "yes", "on")


@dataclass(frozen=True)
class Settings:
    db_path: Path
    base_currency: str = "UGX"
    strict_reservations: bool = False
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        db_path=Path(os.environ.get("SHOPSTOCK_DB_PATH", str(_DEFAULT_DB_PATH))),
        base_currency=os.environ.get("SHOPSTOCK_BASE_CURRENCY", "UGX").upper(),
        strict_reservations=os.environ.get(
            "SHOPSTOCK_STRICT_RESERVATIONS", "False"
        ).lower() in _TRUTHY,
        log_level=os.environ.get("SHOPSTOCK_LOG_LEVEL", "INFO").upper(),
    )
