import os
from dotenv import load_dotenv

# Load .env from the backend directory
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "..", ".env"))

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.abspath(os.path.join(BASE_DIR, "..", ".."))

# Storage: stored in backend/data/ and backend/uploads/
DATABASE_PATH: str = os.getenv(
    "DATABASE_PATH",
    os.path.join(BACKEND_DIR, "data", "superfeynman.db"),
)
UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", os.path.join(BACKEND_DIR, "uploads"))


def _clean_key(raw: str) -> str:
    # Keys pasted into dashboards often pick up stray spaces
    return raw.strip().replace(" ", "")


# Chat provider (any OpenAI-compatible endpoint, OpenRouter by default)
LLM_API_KEY: str = _clean_key(os.getenv("LLM_API_KEY") or os.getenv("OPENROUTER_API_KEY", ""))
LLM_BASE_URL: str = os.getenv("LLM_BASE_URL", "https://openrouter.ai/api/v1").strip()
LLM_MODEL: str = os.getenv("LLM_MODEL", "anthropic/claude-sonnet-4.5").strip()

# Speech-to-text provider
OPENAI_API_KEY: str = _clean_key(os.getenv("OPENAI_API_KEY", ""))
OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").strip()
TRANSCRIPTION_MODEL: str = os.getenv("TRANSCRIPTION_MODEL", "whisper-1").strip()

# Retry envelope shared by both gateways: 1s, 2s, 4s ...
PROVIDER_MAX_ATTEMPTS: int = int(os.getenv("PROVIDER_MAX_ATTEMPTS", "3"))
PROVIDER_BACKOFF_SECONDS: float = float(os.getenv("PROVIDER_BACKOFF_SECONDS", "1.0"))

# 0 leaves turn limits to the client
REVIEW_MAX_TURNS: int = int(os.getenv("REVIEW_MAX_TURNS", "0"))

MAX_NOTES_BYTES: int = int(os.getenv("MAX_NOTES_BYTES", str(5 * 1024 * 1024)))
MAX_AUDIO_BYTES: int = int(os.getenv("MAX_AUDIO_BYTES", str(25 * 1024 * 1024)))

CORS_ORIGINS: list[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()
]

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Per-client request limits, in the limits library's "count/period" syntax
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").strip().lower() in ("1", "true", "yes")
RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "100/15 minutes")
RATE_LIMIT_UPLOADS: str = os.getenv("RATE_LIMIT_UPLOADS", "10/15 minutes")
