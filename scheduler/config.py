"""Environment-variable-based configuration for the simulator host process."""

from __future__ import annotations

import os
from pathlib import Path

INTERVAL_MS: int = int(os.environ.get("BRACELET_INTERVAL_MS", "3000"))
REALISTIC_NOISE: bool = os.environ.get("BRACELET_REALISTIC_NOISE", "1") not in ("0", "false", "False")
DB_PATH: Path = Path(
    os.environ.get("BRACELET_DB_PATH", "~/.bracelet_sim/telemetry.db")
).expanduser()
SEED: int | None = int(os.environ["BRACELET_SEED"]) if os.environ.get("BRACELET_SEED") else None
LOG_LEVEL: str = os.environ.get("BRACELET_LOG_LEVEL", "INFO").upper()
