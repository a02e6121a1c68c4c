"""
Configuration settings for the Users API
"""

import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Environment configuration
ENV = os.getenv("ENV", "PROD")  # PROD, QA or TEST
PORT = int(os.getenv("PORT", 8080))
API_PREFIX = os.getenv("API_PREFIX", "/api")

# Document store configuration
MONGO_URI = os.getenv("MONGO_URI")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "user")
USERS_COLLECTION = os.getenv("USERS_COLLECTION", "users")
MONGO_TIMEOUT_MS = int(os.getenv("MONGO_TIMEOUT_MS", 5000))

# "memory" keeps records in process; tests run against it by default
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory" if ENV == "TEST" else "mongo").lower()

logger.info(f"Environment: {ENV}")
logger.info(f"Store backend: {STORE_BACKEND}")

if STORE_BACKEND not in ("mongo", "memory"):
    raise ValueError(f"Unsupported STORE_BACKEND: {STORE_BACKEND}")

if STORE_BACKEND == "mongo" and not MONGO_URI:
    logger.warning("MONGO_URI not set - database connection will fail at startup")

# CORS settings
ALLOWED_ORIGINS = [
    origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()
]
