"""
Configuration settings for the VOID broadcast server.
"""

import os
import secrets
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# Web server configuration
HOST = os.getenv("VOID_HOST", "0.0.0.0")
PORT = int(os.getenv("VOID_PORT", "9090"))

# Session cookie configuration
# The cookie carries only the colour identity, so plaintext deployments leave
# SESSION_COOKIE_SECURE off; set it to true behind HTTPS.
SECRET_KEY = os.getenv("SECRET_KEY", secrets.token_hex(32))
SESSION_COOKIE_NAME = "connections"
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "False").lower() == "true"
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", "86400"))  # 24 hours in seconds

# Broadcast configuration
EVICT_AFTER = float(os.getenv("EVICT_AFTER", "10"))       # seconds a message stays live
TICK_INTERVAL = float(os.getenv("TICK_INTERVAL", "0.2"))  # seconds between pushes
OUTBOX_SIZE = int(os.getenv("OUTBOX_SIZE", "10"))         # queued events per viewer

# Ingest configuration
MAX_MESSAGE_LENGTH = int(os.getenv("MAX_MESSAGE_LENGTH", "280"))
MAX_CONTENT_LENGTH = 1024 * 1024

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR")
