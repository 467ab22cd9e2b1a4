from __future__ import annotations

import os


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


THINKING_DELAY_MS = float(os.getenv("INSIGHTS_THINKING_DELAY_MS", "800"))
THINKING_JITTER_MS = float(os.getenv("INSIGHTS_THINKING_JITTER_MS", "700"))
VALIDATE_RESULTS = _env_flag("INSIGHTS_VALIDATE_RESULTS", "1")
LOG_LEVEL = os.getenv("INSIGHTS_LOG_LEVEL", "INFO").strip().upper()

MAX_UPLOAD_BYTES = int(os.getenv("INSIGHTS_MAX_UPLOAD_BYTES", str(30 * 1024 * 1024)))
SUPPORTED_EXTENSIONS = {".csv", ".xlsx"}
CSV_ENCODINGS = ("utf-8-sig", "utf-8", "cp1252", "latin-1")

DEFAULT_TOP_N = 5
DEFAULT_TREND_MONTHS = 6
RECENT_PURCHASES_LIMIT = 10
HISTORY_LIMIT = 10
