"""
Configuration settings for the Items CRUD front-end
"""

import os
import logging

# Configure logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Environment configuration
ENV = os.getenv("ENV", "PROD")  # PROD or QA
PORT = int(os.getenv("PORT", 8080))

# Document store configuration
STORE_BACKEND = os.getenv("STORE_BACKEND", "postgres").lower()  # postgres or memory
DATABASE_URL = os.getenv("DATABASE_URL")
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 2))
DB_POOL_MAX_SIZE = int(os.getenv("DB_POOL_MAX_SIZE", 10))
DB_COMMAND_TIMEOUT = float(os.getenv("DB_COMMAND_TIMEOUT", 60))

# Collection bound to the items page
ITEMS_COLLECTION = os.getenv("ITEMS_COLLECTION", "items")

SUPPORTED_BACKENDS = ("postgres", "memory")

logger.info(f"Environment: {ENV}")
logger.info(f"Store backend: {STORE_BACKEND}, items collection: {ITEMS_COLLECTION}")

# Validate required environment variables
if STORE_BACKEND not in SUPPORTED_BACKENDS:
    raise ValueError(f"STORE_BACKEND must be one of {SUPPORTED_BACKENDS}, got: {STORE_BACKEND}")
if STORE_BACKEND == "postgres" and not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable is required for the postgres store backend")

# CORS settings
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:8080").split(",")
    if origin.strip()
]
