import os
from dotenv import load_dotenv

load_dotenv()

# Auth
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Storage ("memory" or "database")
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./trafficx.db")
SQL_ECHO = os.getenv("SQL_ECHO", "False") == "True"

# Exchange
POINTS_PER_HIT = int(os.getenv("POINTS_PER_HIT", "2"))

# Session restart
RESTART_DELAY_SECONDS = float(os.getenv("RESTART_DELAY_SECONDS", "2"))
RESTART_TIMEOUT_SECONDS = int(os.getenv("RESTART_TIMEOUT_SECONDS", "30"))

# Daily counters
TODAY_HITS_RESET_ENABLED = os.getenv("TODAY_HITS_RESET_ENABLED", "True") == "True"

# HTTP
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "False") == "True"
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "5000"))
