"""Configuration management using environment variables"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Seed list loaded into an empty catalog on startup
DEFAULT_SEED_COFFEES = [
    "Irish coffee",
    "Cappuccino",
    "Kopi Luwak",
    "Frappuccino",
    "Cold brew",
    "Espresso",
    "Macchiato",
]

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./coffee_service.db"


class Settings:
    """Application settings - YAGNI: Only what we need right now"""

    def __init__(self):
        # Environment
        self.environment = os.getenv("ENVIRONMENT", "development")

        # Server configuration
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = self._get_int("PORT", 8000)

        # Database configuration (SQLite by default - any SQLAlchemy async URL works)
        if self.environment == "production":
            self.database_url = self._get_required("DATABASE_URL")
        else:
            self.database_url = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

        # CORS origins (comma-separated list)
        self.cors_origins = os.getenv("CORS_ORIGINS", "")

        # Order stream: seconds between ticks
        self.order_interval_seconds = self._get_float("ORDER_INTERVAL_SECONDS", 1.0)
        if self.order_interval_seconds <= 0:
            raise ValueError(
                f"ORDER_INTERVAL_SECONDS must be positive, got {self.order_interval_seconds}"
            )

        # Reject order streams for unknown coffees (off: streams are opened for any id)
        self.validate_order_coffee_id = self._get_bool("VALIDATE_ORDER_COFFEE_ID", False)

        # Seed data
        self.seed_on_startup = self._get_bool("SEED_ON_STARTUP", True)
        seed_env = os.getenv("SEED_COFFEES", "")
        if seed_env.strip():
            self.seed_coffees = [name.strip() for name in seed_env.split(",") if name.strip()]
        else:
            self.seed_coffees = list(DEFAULT_SEED_COFFEES)

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    def _get_required(self, key: str) -> str:
        """Get required environment variable or raise error."""
        value = os.getenv(key, "").strip()
        if not value:
            raise ValueError(
                f"Missing required environment variable: {key}. "
                f"Required in production mode."
            )
        return value

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        raw = os.getenv(key)
        if raw is None or raw.strip() == "":
            return default
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"Invalid integer for {key}: {raw!r}")

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        raw = os.getenv(key)
        if raw is None or raw.strip() == "":
            return default
        try:
            return float(raw)
        except ValueError:
            raise ValueError(f"Invalid number for {key}: {raw!r}")

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        raw = os.getenv(key)
        if raw is None or raw.strip() == "":
            return default
        return raw.strip().lower() in ("1", "true", "yes", "on")


# Global settings instance
settings = Settings()
