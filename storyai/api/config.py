"""API configuration constants.

Single source of truth for environment-driven settings used across the
API layer.
"""

import logging
import os

from dotenv import find_dotenv, load_dotenv

from .logging import book_logger, configure_logging  # noqa: F401

# Load .env from project root (find_dotenv searches parent directories)
load_dotenv(find_dotenv())

# Database (Postgres of the hosted backend; SQLAlchemy-style URL)
DATABASE_URL = os.getenv("DATABASE_URL", "")
DB_POOL_MIN_SIZE = 1
DB_POOL_MAX_SIZE = 10

# Hosted backend (auth + object storage)
SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
SUPABASE_TIMEOUT = 30.0

# Storage buckets
MEDIA_BUCKET = os.getenv("STORYBOOK_MEDIA_BUCKET", "storybook-media")
AVATAR_BUCKET = os.getenv("AVATAR_BUCKET", "avatars")

# Built-in administrator - set via environment variables
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")  # Default for development only
ADMIN_USER_ID = "admin-id"
ADMIN_EMAIL = "admin@storybook.ai"

# Brand settings live in a single row
BRAND_SETTINGS_ID = "00000000-0000-0000-0000-000000000000"
DEFAULT_BRAND_NAME = "StoryAI"

# Uploaded avatars and logos are resized to fit this box
UPLOAD_MAX_SIDE = 400
UPLOAD_MAX_BYTES = 10 * 1024 * 1024

# Remote image downloads for PDF export
EXPORT_FETCH_TIMEOUT = 30.0

# CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Logging
LOG_JSON = os.getenv("LOG_FORMAT", "json").lower() == "json"
LOG_LEVEL = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
