import os
from pathlib import Path
from typing import List, Optional

# Basic settings helper to read environment configuration.

BACKEND_DIR = Path(__file__).resolve().parent


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_int(val: str | None, default: int) -> int:
    if val is None or not val.strip():
        return default
    return int(val)


def _as_float(val: str | None, default: float) -> float:
    if val is None or not val.strip():
        return default
    return float(val)


def _as_list(val: str | None, default: List[str]) -> List[str]:
    if val is None:
        return list(default)
    items = [v.strip() for v in val.split(",") if v.strip()]
    return items or list(default)


class Settings:
    def __init__(self) -> None:
        self.DATABASE_URL: str = os.getenv(
            "DATABASE_URL", f"sqlite:///{BACKEND_DIR / 'data' / 'places.db'}"
        )
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

        # Search behaviour
        self.SEARCH_RESULT_LIMIT: int = _as_int(os.getenv("SEARCH_RESULT_LIMIT"), 5)
        self.PROVIDER_RESULT_LIMIT: int = _as_int(os.getenv("PROVIDER_RESULT_LIMIT"), 10)
        self.SEARCH_FIELDS: List[str] = _as_list(
            os.getenv("SEARCH_FIELDS"), ["name", "description", "address"]
        )
        self.DESCRIPTION_MAX_CHARS: int = _as_int(os.getenv("DESCRIPTION_MAX_CHARS"), 150)

        # External place provider
        self.PROVIDER_ENABLED: bool = _as_bool(os.getenv("PROVIDER_ENABLED"), True)
        self.PARK4NIGHT_BASE_URL: str = os.getenv(
            "PARK4NIGHT_BASE_URL", "https://guest.park4night.com/services/V4.1/lieuxGetFilter.php"
        )
        self.PARK4NIGHT_PLACE_URL: str = os.getenv(
            "PARK4NIGHT_PLACE_URL", "https://park4night.com/en/place/{id}"
        )
        self.PROVIDER_TIMEOUT_SECONDS: float = _as_float(os.getenv("PROVIDER_TIMEOUT_SECONDS"), 15.0)
        self.GEOCODE_TIMEOUT_SECONDS: float = _as_float(os.getenv("GEOCODE_TIMEOUT_SECONDS"), 10.0)

        # Text-generation agent
        self.ANTHROPIC_API_KEY: Optional[str] = os.getenv("ANTHROPIC_API_KEY")
        self.AGENT_MODEL: str = os.getenv("AGENT_MODEL", "claude-3-5-haiku-20241022")
        self.AGENT_MAX_TOKENS: int = _as_int(os.getenv("AGENT_MAX_TOKENS"), 1024)
        self.AGENT_MAX_TOOL_ROUNDS: int = _as_int(os.getenv("AGENT_MAX_TOOL_ROUNDS"), 3)
        self.AGENT_INSTRUCTIONS: Optional[str] = os.getenv("AGENT_INSTRUCTIONS")
        self.AGENT_INSTRUCTIONS_PATH: Optional[str] = os.getenv("AGENT_INSTRUCTIONS_PATH")


settings = Settings()
