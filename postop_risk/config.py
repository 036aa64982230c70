"""
Post-operative Risk Engine: Configuration
==========================================
Centralised settings read from the environment.
Loads secrets from the project-level .env file.
"""

import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

from postop_risk import __version__

# ── Paths ───────────────────────────────────────────────────────────────
PACKAGE_DIR = Path(__file__).resolve().parent                  # postop_risk/
PROJECT_ROOT = PACKAGE_DIR.parent

# ── Load .env ───────────────────────────────────────────────────────────
load_dotenv(PROJECT_ROOT / ".env")

API_VERSION: str = __version__

# ── Logging ─────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE: Optional[str] = os.getenv("LOG_FILE") or None

# ── External vision collaborator (image analysis + report extraction) ───
VISION_API_URL: str = os.getenv("VISION_API_URL", "")
VISION_API_KEY: str = os.getenv("VISION_API_KEY", "")
VISION_TIMEOUT_SECONDS: float = float(os.getenv("VISION_TIMEOUT_SECONDS", "30"))


def _optional_int(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    return int(raw)


# ── Randomness ──────────────────────────────────────────────────────────
# Unset → confidence and projection variance differ between calls.
RISK_RANDOM_SEED: Optional[int] = _optional_int(os.getenv("RISK_RANDOM_SEED"))
