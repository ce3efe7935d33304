# storefront/config.py
import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent

class Config:
    """Configuration settings for the API"""

    # Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    DB_POOL_MIN_SIZE: int = int(os.getenv("DB_POOL_MIN_SIZE", "2"))
    DB_POOL_MAX_SIZE: int = int(os.getenv("DB_POOL_MAX_SIZE", "10"))

    # Auth settings
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    TOKEN_TTL_SECONDS: int = int(os.getenv("TOKEN_TTL_SECONDS", "86400"))

    # Payment simulator settings
    PAYMENT_SUCCESS_RATE: float = float(os.getenv("PAYMENT_SUCCESS_RATE", "0.8"))
    PAYMENT_DELAY_SECONDS: float = float(os.getenv("PAYMENT_DELAY_SECONDS", "0.1"))

    # Rate limiting for /api/orders
    RATE_LIMIT_MAX_REQUESTS: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "10"))
    RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

    # Response cache TTLs (seconds)
    PRODUCT_CACHE_TTL: int = int(os.getenv("PRODUCT_CACHE_TTL", "300"))
    ORDER_CACHE_TTL: int = int(os.getenv("ORDER_CACHE_TTL", "60"))

    # Server settings
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Paths
    LOG_DIR = Path(os.getenv("LOG_DIR", str(BASE_DIR / "logs")))

    @classmethod
    def validate(cls):
        """Fail fast when required settings are missing"""
        if not cls.DATABASE_URL:
            raise ValueError("No DATABASE_URL set in environment")
        if not cls.SECRET_KEY:
            raise ValueError("No SECRET_KEY set in environment")

def setup_logging():
    """Configure logging settings"""
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    Config.LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_file = Config.LOG_DIR / "storefront.log"

    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
        format=log_format,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )
