# prelovin/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    # --- API Info ---
    API_TITLE: str = "Prelovin Marketplace API"
    API_DESCRIPTION: str = "Marketplace for preloved goods: catalog, cart, checkout, order tracking and seller dashboard."
    API_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # --- Server Configuration ---
    PORT: int = int(os.getenv("PORT", "8000"))
    HOST: str = os.getenv("HOST", "0.0.0.0")
    CORS_ORIGINS: list = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
        if origin.strip()
    ]

    # --- Database ---
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./prelovin.db")
    SQL_ECHO: bool = _env_flag("SQL_ECHO", "0")

    # --- Auth (tokens are issued by the identity provider) ---
    AUTH_SECRET_KEY: str = os.getenv("AUTH_SECRET_KEY") or "dev-secret-change-me"
    AUTH_ALGORITHM: str = os.getenv("AUTH_ALGORITHM", "HS256")
    AUTH_AUDIENCE: str = os.getenv("AUTH_AUDIENCE", "")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    # --- Rate limiting ---
    RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "200/minute")
    RATE_LIMIT_ENABLED: bool = _env_flag("RATE_LIMIT_ENABLED", "1")

    # --- Checkout / orders ---
    # Only the buyer or a seller of one of the lines may read an order
    ORDER_DETAIL_OWNER_ONLY: bool = _env_flag("ORDER_DETAIL_OWNER_ONLY", "0")

    # --- Logging ---
    LOG_CONFIG_PATH: str = os.getenv(
        "LOG_CONFIG_PATH",
        os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))), "logging.conf"),
    )


settings = Settings()
