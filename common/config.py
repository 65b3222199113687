"""Environment-driven settings shared by the API, CLI and desktop entrypoints."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional


def _split_origins(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    storage_key: str = "Items"
    currency: str = "PEN"
    env: str = "prod"
    allowed_origins: List[str] = field(default_factory=list)
    log_level: Optional[str] = None

    @property
    def is_dev(self) -> bool:
        return self.env in {"dev", "development"}

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_dir=Path(os.getenv("EXPENSE_TRACKER_DATA_DIR", "data")),
            storage_key=os.getenv("EXPENSE_TRACKER_STORAGE_KEY", "Items"),
            currency=os.getenv("EXPENSE_TRACKER_CURRENCY", "PEN").strip().upper(),
            env=os.getenv("EXPENSE_TRACKER_ENV", "prod").lower(),
            allowed_origins=_split_origins(os.getenv("EXPENSE_TRACKER_ALLOWED_ORIGINS")),
            log_level=os.getenv("EXPENSE_TRACKER_LOG_LEVEL"),
        )

    def with_data_dir(self, data_dir: Optional[Path]) -> "Settings":
        """Return a copy pointing at ``data_dir`` when one is given."""
        if data_dir is None:
            return self
        return replace(self, data_dir=Path(data_dir))
