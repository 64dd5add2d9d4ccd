from __future__ import annotations

import os
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the CalorieAI client store."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("CALORIEAI_DATA_ROOT") or data_root_default
        ).expanduser()
        self.store_path: Path = Path(
            os.environ.get("CALORIEAI_STORE_PATH") or (self.data_root / "calorieai.db")
        ).expanduser()

        # The update announcement id is derived from this string.
        self.app_version: str = os.environ.get("CALORIEAI_APP_VERSION", "1.1.0")
        self.biometric_timeout_sec: float = float(
            os.environ.get("CALORIEAI_BIOMETRIC_TIMEOUT") or "60"
        )
        self.rp_name: str = os.environ.get("CALORIEAI_RP_NAME", "CalorieAI")

        self.analyzer_api_key: str | None = os.environ.get("CALORIEAI_ANALYZER_API_KEY")
        self.analyzer_base_url: str = os.environ.get(
            "CALORIEAI_ANALYZER_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai"
        )
        self.analyzer_model: str = os.environ.get("CALORIEAI_ANALYZER_MODEL", "gemini-2.5-flash")
        self.analyzer_timeout: float = float(os.environ.get("CALORIEAI_ANALYZER_TIMEOUT", "30"))
        self.analyzer_max_tokens: int = int(os.environ.get("CALORIEAI_ANALYZER_MAX_TOKENS", "1024"))
        self.analyzer_temperature: float = float(os.environ.get("CALORIEAI_ANALYZER_TEMPERATURE", "0.2"))

        self.log_level: str = (os.environ.get("CALORIEAI_LOG_LEVEL") or "INFO").upper()

        cors = os.environ.get("CALORIEAI_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
