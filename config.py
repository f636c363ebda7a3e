import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# --------------------------- DB ---------------------------
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./digiforest.db")

# --------------------------- Tokens / passwords ---------------------------
SECRET_KEY = os.getenv("JWT_SECRET", "secret")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
# 0 = tokens never expire (no exp claim)
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "0"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

# --------------------------- Store ---------------------------
PLATFORM_NAME = os.getenv("PLATFORM_NAME", "DigiForest")
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

ADMIN_NAME = os.getenv("ADMIN_NAME", "Admin")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@digiforest.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
SEED_DEMO_DATA = _env_bool("SEED_DEMO_DATA", "true")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def warn_insecure_defaults():
    if SECRET_KEY == "secret":
        logger.warning("JWT_SECRET is not set, tokens are signed with the default secret")
    if ADMIN_PASSWORD == "admin123":
        logger.warning("ADMIN_PASSWORD is not set, the seeded admin uses the default password")
