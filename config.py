# config.py
"""
Shared configuration for the documentation examples.
Values come from the environment (optionally a .env file in the project root).
"""
import os
import logging
from dotenv import load_dotenv

PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))

load_dotenv(os.path.join(PROJECT_ROOT, ".env"))

# --- Output Configuration ---
OUTPUT_DIR = os.getenv("DOCS_OUTPUT_DIR", os.path.join(PROJECT_ROOT, "_site"))
MANIFEST_FILE = os.getenv("DOCS_MANIFEST_FILE", "built_pages.jsonl")

# --- Publishing Configuration ---
PUBLISH_URL = os.getenv("DOCS_PUBLISH_URL")
PUBLISH_USERNAME = os.getenv("DOCS_PUBLISH_USERNAME")
PUBLISH_API_KEY = os.getenv("DOCS_PUBLISH_API_KEY")

if PUBLISH_URL and not (PUBLISH_USERNAME and PUBLISH_API_KEY):
    logging.warning("Warning: DOCS_PUBLISH_URL is set but credentials are missing.")

# --- Retry Configuration ---
MAX_RETRIES = int(os.getenv("DOCS_PUBLISH_MAX_RETRIES", "5"))
INITIAL_BACKOFF_SECONDS = float(os.getenv("DOCS_PUBLISH_BACKOFF", "2"))
MAX_BACKOFF_SECONDS = float(os.getenv("DOCS_PUBLISH_MAX_BACKOFF", "60"))
REQUEST_TIMEOUT = float(os.getenv("DOCS_PUBLISH_TIMEOUT", "30"))

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
