# file: config.py

import os  # env
from typing import List  # types

from dotenv import load_dotenv  # .env

load_dotenv()  # load .env once

# -------------------- Database --------------------
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tapgas.db")  # async url (databases)

# -------------------- Session --------------------
SESSION_SECRET = os.getenv("SESSION_SECRET", "tapgas_secret")  # pepper for token hashes
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "tapgas.sid")  # cookie name
SESSION_MAX_AGE_DAYS = int(os.getenv("SESSION_MAX_AGE_DAYS", "60"))  # 60 days
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").strip().lower() == "true"  # https only
SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "lax").strip().lower()  # lax/strict/none

# -------------------- Login codes --------------------
LOGIN_CODE_TTL_MINUTES = int(os.getenv("LOGIN_CODE_TTL_MINUTES", "10"))  # code lifetime
LOGIN_CODE_IN_RESPONSE = os.getenv("LOGIN_CODE_IN_RESPONSE", "false").strip().lower() == "true"  # dev only

# -------------------- Mail --------------------
MAIL_API_URL = os.getenv("MAIL_API_URL", "").strip()  # http mail endpoint
MAIL_API_KEY = os.getenv("MAIL_API_KEY", "").strip()  # bearer key
MAIL_FROM = os.getenv("MAIL_FROM", "no-reply@tapgas.app").strip()  # sender

# -------------------- CORS --------------------
_cors_env = os.getenv("CORS_ORIGIN", "http://localhost:5173")  # comma separated
CORS_ORIGINS: List[str] = [o.strip() for o in _cors_env.split(",") if o.strip()]  # origins

# -------------------- Logging --------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()  # level name

# -------------------- Routing --------------------
KNOWN_PREFIXES = ("/auth", "/order", "/orders", "/driver", "/assign-cluster", "/profile")  # everything else is 404
LOGGED_PREFIXES = ("/auth", "/order")  # request log
