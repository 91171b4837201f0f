# config.py
"""
Runtime settings, read once from the environment (and a local .env file).
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Auth
JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_TTL_MINUTES = int(os.getenv("ACCESS_TOKEN_TTL_MINUTES", "720"))

# Database
DATABASE_URL = os.getenv("DATABASE_URL")
DB_SERVER = os.getenv("DB_SERVER")
DB_PORT = os.getenv("DB_PORT", "1433")
DB_USER = os.getenv("DB_USER")
DB_PASS = os.getenv("DB_PASS")
DB_NAME = os.getenv("DB_NAME")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Leasing
ACCEPTANCE_WINDOW_HOURS = int(os.getenv("ACCEPTANCE_WINDOW_HOURS", "48"))
CURRENCY = os.getenv("CURRENCY", "USD")

# Realtime
REALTIME_RECONNECT_DELAY = float(os.getenv("REALTIME_RECONNECT_DELAY", "5"))

# HTTP
CORS_ORIGINS = [o for o in os.getenv("CORS_ORIGINS", "").split(",") if o]
PORT = int(os.getenv("PORT", "10000"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").lower()
