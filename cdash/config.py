import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Repo root is always the parent of /cdash
repo_root = Path(__file__).resolve().parent.parent

# Local environment overrides (do NOT commit secrets); process env wins.
load_dotenv(repo_root / ".env", override=False)


def _get_env(name: str, default: str | None = None) -> str:
    val = os.getenv(name, default)
    if val is None or val == "":
        raise RuntimeError(f"Missing required environment variable: {name}")
    return val


@dataclass(frozen=True)
class Settings:
    app_name: str = os.getenv("APP_NAME", "Civic Complaint Dashboard")
    env: str = os.getenv("APP_ENV", os.getenv("ENV", "local"))

    cors_origins: str = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Snapshot export served by the HTTP surface (CSV or JSON records).
    snapshot_path: str = _get_env("SNAPSHOT_PATH", str((repo_root / "data/complaints.csv").resolve()))

    # Area ranking: dashboard shows the top 8 areas, labels cut at 18 chars.
    area_top_n: int = int(os.getenv("AREA_TOP_N", "8"))
    area_label_max_chars: int = int(os.getenv("AREA_LABEL_MAX_CHARS", "18"))

    # "Recent complaints" panel size.
    recent_limit: int = int(os.getenv("RECENT_LIMIT", "5"))

    # Risk tiering: score = volume_weight * total + ratio_weight * (high / total).
    # Tunable per deployment; see services.analytics_service.RiskPolicy.
    risk_volume_weight: float = float(os.getenv("RISK_VOLUME_WEIGHT", "1.0"))
    risk_ratio_weight: float = float(os.getenv("RISK_RATIO_WEIGHT", "10.0"))
    risk_high_threshold: float = float(os.getenv("RISK_HIGH_THRESHOLD", "10.0"))
    risk_medium_threshold: float = float(os.getenv("RISK_MEDIUM_THRESHOLD", "5.0"))


settings = Settings()
