# farmstand/config.py
import os
from pathlib import Path

# Resolve to the project root (one level up from farmstand/)
BASE_DIR = Path(__file__).resolve().parent.parent

DATABASE_URL = os.getenv(
    "FARMSTAND_DATABASE_URL",
    f"sqlite:///{(BASE_DIR / 'farmstand.db').as_posix()}",
)
LOG_LEVEL = os.getenv("FARMSTAND_LOG_LEVEL", "INFO").upper()
