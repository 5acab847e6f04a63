# status_relay/config.py
from functools import lru_cache
from pathlib import Path
import os
from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parents[1]

# Load in ascending precedence; later overrides earlier
load_dotenv(ROOT / ".env")
load_dotenv(ROOT / ".env.local", override=True)

DEFAULT_PORT = 3005


class Settings:
    def __init__(self):
        # Server
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT") or DEFAULT_PORT)
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

        # CORS
        self.ALLOWED_ORIGINS: list[str] = [
            s.strip() for s in os.getenv("ALLOWED_ORIGINS", "*").split(",") if s.strip()
        ]

        # Frontend
        self.STATIC_DIR: Path = Path(os.getenv("STATIC_DIR", str(ROOT / "public")))
        self.INDEX_FILE: str = os.getenv("INDEX_FILE", "index.html")

        # SSE
        self.DISCONNECT_POLL_SECONDS: float = float(os.getenv("DISCONNECT_POLL_SECONDS", "1.0"))
        self.SHUTDOWN_TIMEOUT_SECONDS: int = int(os.getenv("SHUTDOWN_TIMEOUT_SECONDS", "5"))


@lru_cache
def get_settings() -> Settings:
    return Settings()
