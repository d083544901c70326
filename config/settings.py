"""
Configuration settings for NeuroNote
Study pack generation backed by the Gemini REST API
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base paths
BASE_DIR = Path(__file__).resolve().parent.parent
CACHE_DIR = BASE_DIR / "cache"
LOGS_DIR = BASE_DIR / "logs"

# Create directories if they don't exist
for dir_path in [CACHE_DIR, LOGS_DIR]:
    dir_path.mkdir(parents=True, exist_ok=True)

# API Configuration
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", 8000))
API_VERSION = os.getenv("API_VERSION", "v1")
DEBUG_MODE = os.getenv("DEBUG_MODE", "False").lower() == "true"

# CORS
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:8501")

# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")

# Auth (AUTH_DISABLED=true maps every request to LOCAL_USER_ID)
AUTH_DISABLED = os.getenv("AUTH_DISABLED", "false").lower() == "true"
LOCAL_USER_ID = os.getenv("LOCAL_USER_ID", "local-user")

# =============================================================================
# Gemini API Settings
# =============================================================================
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-preview-09-2025")
GEMINI_TTS_MODEL = os.getenv("GEMINI_TTS_MODEL", "gemini-2.5-flash-preview-tts")
GEMINI_TTS_VOICE = os.getenv("GEMINI_TTS_VOICE", "Kore")
GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", 120))

# Retry ceiling for outbound model calls (attempts after the first one)
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", 5))

# =============================================================================
# Upload limits
# =============================================================================
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", 10))
MAX_UPLOAD_FILES = int(os.getenv("MAX_UPLOAD_FILES", 5))
MAX_TEXT_CHARS = int(os.getenv("MAX_TEXT_CHARS", 100000))
MAX_SPEECH_CHARS = int(os.getenv("MAX_SPEECH_CHARS", 5000))

# Cache Settings
CACHE_STUDY_PACK_TTL = int(os.getenv("CACHE_STUDY_PACK_TTL", 86400))

# API Rate Limiting
RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE", 30))
RATE_LIMIT_PER_HOUR = int(os.getenv("RATE_LIMIT_PER_HOUR", 500))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = Path(os.getenv("LOG_FILE", str(LOGS_DIR / "neuronote.log")))
LOG_ROTATION = os.getenv("LOG_ROTATION", "10 MB")
LOG_RETENTION = os.getenv("LOG_RETENTION", "7 days")

# Front-end
API_BASE_URL = os.getenv("NEURONOTE_API_URL", f"http://localhost:{API_PORT}/api/{API_VERSION}")
