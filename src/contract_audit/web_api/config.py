"""
Configuration settings for the API.
Environment variables (same names as the fields) override defaults.
"""
import os
from dataclasses import dataclass, field, fields
from typing import List


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("true", "1", "yes", "on")


def _parse_list(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


_PARSERS = {
    bool: _parse_bool,
    int: int,
    List[str]: _parse_list,
}


@dataclass
class Settings:
    """API Configuration"""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: List[str] = field(default_factory=lambda: ["*"])

    # Analysis
    MAX_SOURCE_BYTES: int = 1_000_000
    ANALYZER_WORKERS: int = 0  # 0 = run rules inline

    def __post_init__(self):
        for f in fields(self):
            raw = os.getenv(f.name)
            if raw is not None:
                setattr(self, f.name, _PARSERS.get(f.type, str)(raw))


# Global settings instance
settings = Settings()
