# app/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./pos.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
# sql albo redis
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "sql")
STORAGE_KEY_PREFIX = os.getenv("STORAGE_KEY_PREFIX", "inventory_app")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
