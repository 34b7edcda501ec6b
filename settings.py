import os
from typing import Any, Dict

from dotenv import load_dotenv

load_dotenv()


def get_app_config() -> Dict[str, Any]:
    """Get application configuration from environment variables"""
    origins = os.getenv("CORS_ORIGINS", "*")
    return {
        "testing": os.getenv("TESTING") == "1",
        "database_url": os.getenv("DATABASE_URL"),
        "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
        "cors_origins": [o.strip() for o in origins.split(",") if o.strip()],
    }
